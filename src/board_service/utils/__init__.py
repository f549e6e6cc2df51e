"""Shared utilities."""

from board_service.utils.ids import generate_unique_id, initials_for, random_color
from board_service.utils.logging import get_logger, setup_logging
from board_service.utils.metrics import get_metrics

__all__ = [
    "get_logger",
    "setup_logging",
    "get_metrics",
    "generate_unique_id",
    "initials_for",
    "random_color",
]
