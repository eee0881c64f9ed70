"""Parsing of the duration badge shown on listing items ("mm:ss" / "hh:mm:ss")."""

from typing import Sequence

from app.services.errors import DurationParseError

_COMPONENTS = {
    2: ("minutes", "seconds"),
    3: ("hours", "minutes", "seconds"),
}
_FACTORS = {"hours": 3600, "minutes": 60, "seconds": 1}


def _component(value: str, name: str) -> int:
    # int() would also accept "+5", " 5" and "٥"; only plain ASCII digits are valid.
    if not value or not (value.isascii() and value.isdigit()):
        raise DurationParseError(f"invalid {name}: {value!r}")
    return int(value)


def parse_duration(text: str) -> int:
    """Return the number of seconds described by *text*.

    Minutes and seconds are not range-checked ("1:75" is 135 seconds).
    Empty text is not a duration; callers handle it before calling.

    Raises:
        DurationParseError: wrong number of parts, or a non-numeric part.
    """
    parts: Sequence[str] = text.split(":")
    names = _COMPONENTS.get(len(parts))
    if names is None:
        raise DurationParseError(f"invalid duration format {text!r}")

    return sum(_component(part, name) * _FACTORS[name] for part, name in zip(parts, names))


def format_duration(seconds: int) -> str:
    """Render *seconds* as "hh:mm:ss", or "mm:ss" below one hour (itunes:duration)."""
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"
