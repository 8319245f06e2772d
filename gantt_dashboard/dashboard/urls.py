from django.urls import path

from gantt_dashboard.dashboard import views

app_name = "dashboard"

urlpatterns = [
    path("", views.dashboard_data, name="data"),
]
