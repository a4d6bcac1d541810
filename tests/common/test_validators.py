from __future__ import annotations

from datetime import date

import pytest

from src.team_tasks.team_tasks.common.validators import (
    optional_text,
    parse_bool,
    parse_enum,
    require_date,
    require_email,
    require_int,
    require_non_empty,
)
from src.team_tasks.team_tasks.core.enums import TaskPriority
from src.team_tasks.team_tasks.core.exceptions import ValidationError


def test_require_non_empty_strips():
    assert require_non_empty("  x ", "Name") == "x"
    with pytest.raises(ValidationError, match="Name is required"):
        require_non_empty("   ", "Name")


def test_require_email_lowercases():
    assert require_email(" Bob@Example.COM ") == "bob@example.com"
    with pytest.raises(ValidationError):
        require_email("bob@")


def test_require_date():
    assert require_date("2024-06-01", "Due date") == date(2024, 6, 1)
    assert require_date("2024-06-01T10:00:00Z", "Due date") == date(2024, 6, 1)
    with pytest.raises(ValidationError):
        require_date("2024-13-01", "Due date")


def test_require_int_rejects_bools():
    assert require_int("12", "id") == 12
    with pytest.raises(ValidationError):
        require_int(True, "id")


def test_parse_enum():
    assert parse_enum(TaskPriority, "URGENT", "Priority") is TaskPriority.URGENT
    assert parse_enum(TaskPriority, "", "Priority", default=TaskPriority.MEDIUM) is TaskPriority.MEDIUM
    with pytest.raises(ValidationError, match="low, medium, high, urgent"):
        parse_enum(TaskPriority, "asap", "Priority")


@pytest.mark.parametrize("value,expected", [(True, True), (0, False), ("true", True), ("0", False)])
def test_parse_bool(value, expected):
    assert parse_bool(value, "is_active") is expected


def test_optional_text():
    assert optional_text(None) == ""
    assert optional_text("  hi ") == "hi"
