"""
Tests for domain models.
"""

import pytest

from schedulebuilder.domain.models import (
    AttributeList,
    GridConfig,
    RequiredAttribute,
    SelectionMode,
    TimeSlot,
)


class TestSelectionMode:
    """Tests for SelectionMode."""

    def test_wire_identifiers(self):
        """Test that the mode identifiers stay stable."""
        assert [m.value for m in SelectionMode] == [
            "cannot", "prefer-not", "available", "preferred",
        ]

    def test_labels(self):
        """Test human labels."""
        assert SelectionMode.PREFER_NOT.label == "Prefer Not"
        assert SelectionMode("cannot") is SelectionMode.CANNOT


class TestTimeSlot:
    """Tests for TimeSlot."""

    def test_wire_shape(self):
        """Test conversion to and from the wire shape."""
        slot = TimeSlot(day=0, time=480, mode=SelectionMode.AVAILABLE)

        assert slot.to_dict() == {"day": 0, "time": 480, "mode": "available"}
        assert TimeSlot.from_dict({"day": 0, "time": 480, "mode": "available"}) == slot
        assert slot.key == (0, 480)

    def test_unknown_mode_rejected(self):
        """Test that unknown mode strings raise ValueError."""
        with pytest.raises(ValueError):
            TimeSlot.from_dict({"day": 0, "time": 480, "mode": "maybe"})

    def test_with_mode(self):
        """Test that with_mode keeps the key."""
        slot = TimeSlot(1, 540, SelectionMode.CANNOT).with_mode(SelectionMode.PREFERRED)

        assert slot == TimeSlot(1, 540, SelectionMode.PREFERRED)


class TestAttributeList:
    """Tests for AttributeList."""

    def test_order_is_kept(self):
        """Test that pairs stay in insertion order."""
        attrs = AttributeList([("b", "2"), ("a", "1")])
        attrs.append("c", "3")

        assert attrs.as_pairs() == [("b", "2"), ("a", "1"), ("c", "3")]
        assert attrs.index_of("a") == 1
        assert attrs.get("missing") is None


class TestRequiredAttribute:
    """Tests for RequiredAttribute."""

    def test_accepts(self):
        """Test free-form and option-restricted attributes."""
        assert RequiredAttribute("Guardian").accepts("Pat")
        assert not RequiredAttribute("Guardian").accepts(None)
        assert RequiredAttribute("Grade", ("K",)).accepts("K")
        assert not RequiredAttribute("Grade", ("K",)).accepts("1")


def test_grid_config_with_changes():
    """GridConfig copies are independent."""
    base = GridConfig()
    changed = base.with_changes(include_sunday=True)

    assert changed.include_sunday
    assert not base.include_sunday
