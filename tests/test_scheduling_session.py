"""
Tests for the SchedulingSession host.
"""

import pytest

from schedulebuilder.domain.exceptions import EntityNotFoundError
from schedulebuilder.domain.models import GridConfig, MeetingRequirement, SelectionMode, TimeSlot
from schedulebuilder.services.entity_store import EntityStore
from schedulebuilder.services.scheduling_session import SchedulingSession


@pytest.fixture
def store():
    return EntityStore()


@pytest.fixture
def session(store):
    return SchedulingSession(store)


class TestSelection:
    """Tests for selecting the painted entity."""

    def test_no_selection_disables_grid(self, session):
        """Test that pointer events without a selection change nothing."""
        session.pointer_down(1, 480)

        assert session.grid_disabled
        assert session.engine.disabled
        assert session.engine.schedule == []

    def test_changes_are_written_back(self, session, store):
        """Test that every engine change replaces the stored schedule."""
        alice = store.add_student("Alice")
        session.select(alice.id)

        session.pointer_down(1, 480)
        session.pointer_enter(1, 540)
        session.pointer_up()

        assert alice.schedule == [
            TimeSlot(1, 480, SelectionMode.AVAILABLE),
            TimeSlot(1, 540, SelectionMode.AVAILABLE),
        ]

    def test_switching_entities_keeps_schedules_separate(self, session, store):
        """Test that each entity owns an independent schedule."""
        alice = store.add_student("Alice")
        smith = store.add_educator("Ms. Smith")

        session.select(alice.id)
        session.pointer_down(1, 480)
        session.pointer_up()

        session.select(smith.id)
        session.set_mode(SelectionMode.CANNOT)
        session.pointer_down(2, 600)
        session.pointer_up()

        assert alice.schedule == [TimeSlot(1, 480, SelectionMode.AVAILABLE)]
        assert smith.schedule == [TimeSlot(2, 600, SelectionMode.CANNOT)]

    def test_reselect_loads_stored_schedule(self, session, store):
        """Test that toggling works against the stored schedule after reselecting."""
        alice = store.add_student("Alice")
        store.replace_schedule(alice.id, [TimeSlot(1, 480, SelectionMode.AVAILABLE)])

        session.select(alice.id)
        session.pointer_down(1, 480)

        assert alice.schedule == []

    def test_select_unknown(self, session):
        """Test that selecting an unknown id raises."""
        with pytest.raises(EntityNotFoundError):
            session.select("missing")

    def test_deleting_selected_clears_selection(self, session, store):
        """Test that deleting the selected entity disables the grid."""
        alice = store.add_student("Alice")
        session.select(alice.id)

        session.delete(alice.id)

        assert session.selected is None
        assert session.grid_disabled

    def test_host_disable_cannot_enable_without_selection(self, session):
        """Test that enabling with nothing selected keeps the engine off."""
        session.set_disabled(False)

        assert session.engine.disabled

    def test_host_disable_survives_switching_entities(self, session, store):
        """Test that selecting another entity does not re-enable a disabled grid."""
        alice = store.add_student("Alice")
        bob = store.add_student("Bob")
        session.select(alice.id)
        session.set_disabled(True)

        session.select(bob.id)
        session.pointer_down(1, 480)
        session.pointer_up()

        assert session.engine.disabled
        assert bob.schedule == []

        session.set_disabled(False)
        session.pointer_down(1, 480)
        session.pointer_up()

        assert bob.schedule == [TimeSlot(1, 480, SelectionMode.AVAILABLE)]


class TestGridAndClear:
    """Tests for grid changes and clearing."""

    def test_narrowed_grid_hides_but_keeps_slots(self, session, store):
        """Test that slots outside a narrowed grid are retained."""
        alice = store.add_student("Alice")
        session.select(alice.id)
        session.pointer_down(1, 480)
        session.pointer_up()
        session.pointer_down(1, 900)
        session.pointer_up()

        session.set_grid_config(GridConfig(start_hour=12, end_hour=16))

        assert len(alice.schedule) == 2
        assert session.visible_slots() == [TimeSlot(1, 900, SelectionMode.AVAILABLE)]

    def test_clear_all(self, session, store):
        """Test that clear all empties the selected schedule and the engine."""
        alice = store.add_student("Alice")
        session.select(alice.id)
        session.pointer_down(1, 480)
        session.pointer_up()

        session.clear_all()

        assert alice.schedule == []
        assert session.engine.schedule == []


class TestReport:
    """Tests for the availability report."""

    def test_report_payload(self, session, store):
        """Test that the report carries every entity in wire shape."""
        smith = store.add_educator("Ms. Smith")
        alice = store.add_student(
            "Alice",
            attributes=[("Grade", "3")],
            meeting_requirements=[MeetingRequirement(smith.id, 2, 30)],
        )
        session.select(alice.id)
        session.set_mode(SelectionMode.PREFER_NOT)
        session.pointer_down(1, 480)
        session.pointer_up()

        report = session.generate_report()

        student = report["students"][0]
        assert student["name"] == "Alice"
        assert student["attributes"] == [["Grade", "3"]]
        assert student["schedule"] == [{"day": 1, "time": 480, "mode": "prefer-not"}]
        assert student["meeting_requirements"] == [{
            "educator_id": smith.id,
            "meetings_per_week": 2,
            "meeting_duration_minutes": 30,
        }]
        assert report["educators"][0]["name"] == "Ms. Smith"
        assert "meeting_requirements" not in report["educators"][0]
