"""
Tests for stretch field validation.
"""
import pytest

from stretch_tracker.core.types import Category, Priority
from stretch_tracker.services.validation import (
    DESCRIPTION_MAX_LENGTH,
    NAME_MAX_LENGTH,
    validate_stretch,
)


def _valid(**overrides):
    fields = {
        "name": "Hip Flexor Lunge",
        "priority": "high",
        "category": "hips",
        "description": "Kneel and push the hips forward",
    }
    fields.update(overrides)
    return validate_stretch(**fields)


class TestValidateStretch:

    def test_valid(self):
        result = _valid()
        assert result.valid is True
        assert result.errors == []

    def test_enum_members_accepted(self):
        assert _valid(priority=Priority.low, category=Category.feet_ankles).valid

    @pytest.mark.parametrize("category", [c.value for c in Category])
    def test_every_category_accepted(self, category):
        assert _valid(category=category).valid

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_name_required(self, name):
        assert _valid(name=name).errors == ["Stretch name is required"]

    def test_name_length_boundary(self):
        assert _valid(name="x" * NAME_MAX_LENGTH).valid
        assert _valid(name="x" * (NAME_MAX_LENGTH + 1)).errors == [
            "Stretch name must be 100 characters or fewer"
        ]

    @pytest.mark.parametrize("priority", ["medium", "HIGH", "", None])
    def test_bad_priority(self, priority):
        assert _valid(priority=priority).errors == ["Priority must be 'high' or 'low'"]

    @pytest.mark.parametrize("category", ["legs", "Hips", "", None])
    def test_bad_category(self, category):
        assert _valid(category=category).errors == ["Invalid category selected"]

    @pytest.mark.parametrize("description", ["", "  \n", None])
    def test_description_required(self, description):
        assert _valid(description=description).errors == ["Description is required"]

    def test_description_length_boundary(self):
        assert _valid(description="d" * DESCRIPTION_MAX_LENGTH).valid
        assert _valid(description="d" * (DESCRIPTION_MAX_LENGTH + 1)).errors == [
            "Description must be 500 characters or fewer"
        ]

    def test_all_failures_reported_in_rule_order(self):
        result = validate_stretch("", "urgent", "legs", "")
        assert result.valid is False
        assert result.errors == [
            "Stretch name is required",
            "Priority must be 'high' or 'low'",
            "Invalid category selected",
            "Description is required",
        ]

    def test_whitespace_only_overlong_name_reports_both(self):
        result = _valid(name=" " * (NAME_MAX_LENGTH + 1))
        assert result.errors == [
            "Stretch name is required",
            "Stretch name must be 100 characters or fewer",
        ]
