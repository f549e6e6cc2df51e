"""Input validation for tasks, contacts and registration.

Every check collects all field errors before raising, so callers can
flag each bad input at once. Nothing is mutated or persisted here.
"""

import re
from datetime import date
from typing import Any

from board_service.core.errors import ValidationFailure
from board_service.models import Category, Priority, TaskDraft

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

REQUIRED = "This field is required"


def parse_due_date(value: date | str | None) -> date | None:
    """Parse an ISO ``YYYY-MM-DD`` date, returning None if absent or malformed."""
    if isinstance(value, date):
        return value
    if not value or not value.strip():
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


def validate_task_draft(
    draft: TaskDraft,
    today: date | None = None,
    allow_past_due: bool = False,
) -> dict[str, Any]:
    """Turn a draft into clean task fields.

    Args:
        draft: Raw task fields
        today: Reference date for the past-due check (defaults to today)
        allow_past_due: Accept due dates before ``today`` (used on edit,
            where an existing task may already be overdue)

    Returns:
        Keyword arguments for the task fields title, description,
        due_date, priority, category, contacts and subtasks

    Raises:
        ValidationFailure: If title, due date or category are invalid
    """
    errors: dict[str, str] = {}
    today = today or date.today()

    title = draft.title.strip()
    if not title:
        errors["title"] = REQUIRED

    due_date = parse_due_date(draft.due_date)
    if due_date is None:
        errors["dueDate"] = REQUIRED
    elif not allow_past_due and due_date < today:
        errors["dueDate"] = "Due date cannot be in the past."

    category: Category | None = None
    try:
        category = Category(draft.category) if draft.category else None
    except ValueError:
        category = None
    if category is None:
        errors["category"] = "Select task category"

    if errors:
        raise ValidationFailure(errors)

    try:
        priority = Priority(draft.priority)
    except ValueError:
        priority = Priority.MEDIUM

    return {
        "title": title,
        "description": draft.description,
        "due_date": due_date,
        "priority": priority,
        "category": category,
        "contacts": [contact.snapshot() for contact in draft.contacts],
        "subtasks": [subtask.model_copy() for subtask in draft.subtasks if subtask.text.strip()],
    }


def validate_contact_fields(name: str, email: str, number: str) -> tuple[str, str, str]:
    """Validate and trim contact fields.

    Raises:
        ValidationFailure: If a field is empty or the email is malformed
    """
    errors: dict[str, str] = {}
    name, email, number = name.strip(), email.strip(), number.strip()

    if not name:
        errors["name"] = REQUIRED
    if not email:
        errors["email"] = REQUIRED
    elif not EMAIL_PATTERN.match(email):
        errors["email"] = "Please enter a valid email address."
    if not number:
        errors["number"] = REQUIRED

    if errors:
        raise ValidationFailure(errors)
    return name, email, number


def validate_registration(name: str, email: str, password: str) -> tuple[str, str]:
    """Validate sign-up fields, returning the trimmed name and email."""
    errors: dict[str, str] = {}
    name, email = name.strip(), email.strip()

    if not name:
        errors["name"] = REQUIRED
    if not email:
        errors["email"] = REQUIRED
    elif not EMAIL_PATTERN.match(email):
        errors["email"] = "Please enter a valid email address."
    if not password:
        errors["password"] = REQUIRED

    if errors:
        raise ValidationFailure(errors)
    return name, email
