"""Identifier and display attribute helpers."""

import random
import string
import time

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_unique_id() -> str:
    """Generate a unique identifier for tasks and contacts.

    Millisecond timestamp followed by nine random base-36 characters,
    the same shape the stored documents already use.

    Returns:
        Identifier string
    """
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"{int(time.time() * 1000)}{suffix}"


def random_color() -> str:
    """Generate a random hex color code (e.g. ``#1fd7c1``)."""
    return f"#{random.randrange(0x1000000):06x}"


def initials_for(name: str) -> str:
    """Return the display initials of a name.

    First and last word initials for multi-word names, the first
    character only for single-word names.

    Args:
        name: Full name

    Returns:
        Uppercased initials (empty for a blank name)
    """
    parts = name.split()
    if not parts:
        return ""
    if len(parts) > 1:
        return (parts[0][0] + parts[-1][0]).upper()
    return parts[0][0].upper()
