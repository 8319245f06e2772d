import pytest

from gantt_dashboard.dashboard.references import build_reference_map, display_text, resolve_reference
from gantt_dashboard.dashboard.tests.factories import raw_record


def test_build_reference_map():
    records = [
        raw_record("rec1", Name="Jane Doe"),
        raw_record("rec2", Name="  John Smith "),
        raw_record("rec3"),
        raw_record("rec4", Name=""),
    ]

    people = build_reference_map(records, "Name")

    assert people == {"rec1": "Jane Doe", "rec2": "John Smith", "rec3": "Unknown", "rec4": "Unknown"}


def test_build_reference_map_custom_field():
    records = [raw_record("rec1", **{"Full name": "Jane Doe", "Name": "jd"})]

    assert build_reference_map(records, "Full name") == {"rec1": "Jane Doe"}


class TestResolveReference:
    people = {"rec123": "Jane Doe", "rec456": "John Smith"}

    def test_linked_record(self):
        assert resolve_reference(["rec123"], self.people) == "Jane Doe"

    def test_first_linked_record_wins(self):
        assert resolve_reference(["rec456", "rec123"], self.people) == "John Smith"

    def test_missing_id_is_unknown(self):
        assert resolve_reference(["rec999"], self.people, missing="Unassigned") == "Unknown"
        assert resolve_reference(["rec123"], {}) == "Unknown"

    def test_free_text(self):
        assert resolve_reference("External consultant", self.people) == "External consultant"

    @pytest.mark.parametrize("value", [None, [], "", 42, {"id": "rec123"}])
    def test_sentinel(self, value):
        assert resolve_reference(value, self.people, missing="Unassigned") == "Unassigned"
        assert resolve_reference(value, self.people) == "Unknown"

    @pytest.mark.parametrize(
        "value",
        [
            [{"id": "usr1", "email": "jane@example.com", "name": "Jane Doe"}],
            [["rec123"]],
            [None, "rec123"],
            [42],
        ],
    )
    def test_non_id_linked_value(self, value):
        assert resolve_reference(value, self.people, missing="Unassigned") == "Unknown"


@pytest.mark.parametrize(
    "value,expected",
    [
        ("Complete", "Complete"),
        (["1. Governance and Leadership"], "1. Governance and Leadership"),
        ([], ""),
        (None, ""),
        (3, "3"),
        (True, ""),
    ],
)
def test_display_text(value, expected):
    assert display_text(value) == expected
