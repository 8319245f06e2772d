import datetime

import pytest

from gantt_dashboard.dashboard.field_map import FieldMap, resolve_field_map
from gantt_dashboard.dashboard.projection import RecordProjector, References, parse_date
from gantt_dashboard.dashboard.tests.factories import raw_record


@pytest.fixture
def references():
    return References(
        people={"rec123": "Jane Doe", "rec456": "John Smith"},
        priorities={"recP1": "1. Governance and Leadership"},
        notes={"recN1": "Waiting on board sign-off"},
    )


@pytest.fixture
def projector(references):
    return RecordProjector(FieldMap(), references)


class TestProjectMilestone:
    def test_full_record(self, projector):
        record = raw_record(
            "recM1",
            Name="Board approval",
            Deadline="2025-09-01",
            Status="In progress",
            Accountable=["rec123"],
            Priority=["2. Grant making"],
            Activities=["recA1", "recA2"],
            **{"Start Date": "2025-07-15"},
        )

        milestone = projector.project_milestone(record)

        assert milestone.id == "recM1"
        assert milestone.name == "Board approval"
        assert milestone.status == "In progress"
        assert milestone.accountable == "Jane Doe"
        assert milestone.priority == "2. Grant making"
        assert milestone.deadline == datetime.date(2025, 9, 1)
        assert milestone.start_date == datetime.date(2025, 7, 15)
        assert milestone.has_start_date is True
        assert milestone.activity_ids == ("recA1", "recA2")

    def test_configured_name_field(self, references):
        field_map = resolve_field_map([{"Key": "milestone_name_field", "Value": "Title"}])
        record = raw_record("recM1", Title="Kickoff", Deadline="2025-09-01")

        milestone = RecordProjector(field_map, references).project_milestone(record)

        assert milestone.name == "Kickoff"

    def test_missing_start_date_is_estimated(self, projector):
        milestone = projector.project_milestone(raw_record("recM1", Deadline="2025-01-15"))

        assert milestone.start_date == datetime.date(2024, 10, 15)
        assert milestone.has_start_date is False

    def test_estimate_clamps_to_month_end(self, projector):
        milestone = projector.project_milestone(raw_record("recM1", Deadline="2025-05-31"))

        assert milestone.start_date == datetime.date(2025, 2, 28)

    def test_no_deadline(self, projector):
        milestone = projector.project_milestone(raw_record("recM1", Name="Someday"))

        assert milestone.deadline is None
        assert milestone.start_date is None
        assert milestone.timeline_span() is None

    def test_malformed_record_uses_defaults(self, projector):
        milestone = projector.project_milestone(raw_record("recM1", Deadline="not a date", Status=None))

        assert milestone.name == "Untitled"
        assert milestone.status == "Unknown"
        assert milestone.priority == "Unknown"
        assert milestone.accountable == "Unassigned"
        assert milestone.deadline is None
        assert milestone.activity_ids == ()

    def test_accountable_free_text(self, projector):
        milestone = projector.project_milestone(raw_record("recM1", Accountable="Finance team"))

        assert milestone.accountable == "Finance team"

    def test_accountable_missing_reference(self, projector):
        milestone = projector.project_milestone(raw_record("recM1", Accountable=["rec999"]))

        assert milestone.accountable == "Unknown"

    def test_priority_from_linked_id(self, projector):
        milestone = projector.project_milestone(raw_record("recM1", **{"Priority area": ["recP1"]}))

        assert milestone.priority == "1. Governance and Leadership"

    def test_priority_name_takes_precedence(self, projector):
        record = raw_record("recM1", Priority="4. Learning and Impact", **{"Priority area": ["recP1"]})

        assert projector.project_milestone(record).priority == "4. Learning and Impact"

    def test_unknown_priority_id(self, projector):
        milestone = projector.project_milestone(raw_record("recM1", **{"Priority area": ["recP9"]}))

        assert milestone.priority == "Unknown"

    def test_datetime_deadline(self, projector):
        milestone = projector.project_milestone(raw_record("recM1", Deadline="2025-09-01T10:00:00.000Z"))

        assert milestone.deadline == datetime.date(2025, 9, 1)

    def test_record_is_not_mutated(self, projector):
        record = raw_record("recM1", Deadline="2025-01-15", Accountable=["rec123"])
        before = dict(record.fields)

        projector.project_milestone(record)

        assert record.fields == before


class TestProjectAction:
    def _action(self, **fields):
        defaults = {"Name": "Draft budget", "Current Status (TPW Role)": "Current", "Director View": True}
        return raw_record("recX1", **{**defaults, **fields})

    def test_full_record(self, projector):
        record = self._action(Responsible=["rec123"], Deadline="2025-03-01", Status="In progress", Notes="Call Bob")

        action = projector.project_action(record)

        assert action.id == "recX1"
        assert action.name == "Draft budget"
        assert action.responsible == "Jane Doe"
        assert action.deadline == datetime.date(2025, 3, 1)
        assert action.status == "In progress"
        assert action.role == "Current"
        assert action.director_view is True
        assert action.notes == "Call Bob"

    def test_responsible_missing_reference(self):
        record = self._action(Responsible=["rec123"])

        assert RecordProjector(FieldMap(), References()).project_action(record).responsible == "Unknown"

    def test_responsible_unassigned(self, projector):
        assert projector.project_action(self._action()).responsible == "Unassigned"

    def test_linked_notes(self, projector):
        assert projector.project_action(self._action(Notes=["recN1"])).notes == "Waiting on board sign-off"
        assert projector.project_action(self._action(Notes=["recN9"])).notes == "Unknown"

    def test_missing_notes(self, projector):
        action = projector.project_action(self._action())

        assert action.notes == ""
        assert action.notes_preview() == ("", False)

    def test_notes_preview(self, projector):
        action = projector.project_action(self._action(Notes="word " * 40))

        preview, truncated = action.notes_preview(limit=20)

        assert truncated is True
        assert preview == "word word word word..."

    @pytest.mark.parametrize(
        "role,director_view,included",
        [
            ("Current", True, True),
            ("Current", False, False),
            ("Past", True, False),
            ("Future", True, False),
            ("current", True, False),
            (None, True, False),
            ("Current", None, False),
            ("Current", "true", False),
            ("Current", 1, False),
        ],
    )
    def test_director_view_filter(self, projector, role, director_view, included):
        record = self._action(**{"Current Status (TPW Role)": role, "Director View": director_view})

        assert (projector.project_action(record) is not None) is included

    @pytest.mark.parametrize(
        "director_view,included",
        [
            (True, True),
            ("true", True),
            ("TRUE", True),
            (1, True),
            ("1", True),
            (False, False),
            (0, False),
            ("no", False),
        ],
    )
    def test_loose_truthy_director_view(self, references, director_view, included):
        projector = RecordProjector(FieldMap(), references, loose_truthy=True)
        record = self._action(**{"Director View": director_view})

        assert (projector.project_action(record) is not None) is included

    def test_project_actions_filters(self, projector):
        records = [
            self._action(**{"Current Status (TPW Role)": "Current", "Director View": True}),
            self._action(**{"Current Status (TPW Role)": "Current", "Director View": False}),
            self._action(**{"Current Status (TPW Role)": "Past", "Director View": True}),
        ]

        assert len(projector.project_actions(records)) == 1

    def test_configured_fields(self, references):
        field_map = resolve_field_map(
            [
                {"Key": "action_tpw_role_field", "Value": "Role"},
                {"Key": "action_director_view_field", "Value": "Share"},
                {"Key": "action_responsible_field", "Value": "Owner"},
            ]
        )
        record = raw_record("recX1", Name="Plan", Role="Current", Share=True, Owner=["rec456"])

        action = RecordProjector(field_map, references).project_action(record)

        assert action.responsible == "John Smith"


@pytest.mark.parametrize(
    "value,expected",
    [
        ("2025-01-15", datetime.date(2025, 1, 15)),
        ("2025-01-15T23:00:00.000Z", datetime.date(2025, 1, 15)),
        (datetime.date(2025, 1, 15), datetime.date(2025, 1, 15)),
        ("15/01/2025", None),
        ("", None),
        (None, None),
        (20250115, None),
    ],
)
def test_parse_date(value, expected):
    assert parse_date(value) == expected
