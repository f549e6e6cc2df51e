"""Board summary figures and greeting."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict

from board_service.models import STATUS_ORDER, Board, Priority, TaskStatus


class BoardSummary(BaseModel):
    """Counts shown on the summary page."""

    model_config = ConfigDict(frozen=True)

    counts: dict[TaskStatus, int]
    total: int
    urgent: int
    next_urgent_due: date | None = None


def summarize(board: Board) -> BoardSummary:
    """Count tasks per status and find the next urgent deadline.

    Urgent tasks already in ``done`` are not counted.
    """
    counts = {status: len(board.column(status)) for status in STATUS_ORDER}
    urgent = [
        task
        for status, _, task in board.iter_tasks()
        if task.priority == Priority.URGENT and status != TaskStatus.DONE
    ]
    due_dates = [task.due_date for task in urgent if task.due_date is not None]
    return BoardSummary(
        counts=counts,
        total=sum(counts.values()),
        urgent=len(urgent),
        next_urgent_due=min(due_dates) if due_dates else None,
    )


def greeting(now: datetime | None = None) -> str:
    hour = (now or datetime.now()).hour
    if hour < 12:
        return "Good morning,"
    if hour < 18:
        return "Good afternoon,"
    return "Good evening,"


def format_due_date(value: date) -> str:
    """Format a date as ``January 5, 2099``."""
    return f"{value.strftime('%B')} {value.day}, {value.year}"
