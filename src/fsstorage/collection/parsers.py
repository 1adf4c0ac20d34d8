"""
Record Parsers
==============

Ready-made parsers for Identifier patterns keyed on dates, e.g.
``"{year}/{month}/{day}-{id}"``. The current date comes from an injected
clock so callers (and tests) control what "today" is.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, Optional

from ..error_handling import PreconditionFailedError

Clock = Callable[[], datetime]

_DATE_FIELDS = (("year", "%Y"), ("month", "%m"), ("day", "%d"))


def make_date_parser(
    required: Iterable[str] = ("id",),
    clock: Optional[Clock] = None,
) -> Callable[[Any], Dict[str, Any]]:
    """
    Build a parser filling ``year``/``month``/``day`` from a clock.

    The returned parser copies the record into a new dict, so the caller's
    record is never mutated. Date fields already present are kept.

    Args:
        required: Fields the record must carry
        clock: Returns the current datetime; defaults to ``datetime.now``

    Raises:
        PreconditionFailedError: From the parser, when a required field is
            missing
    """
    required = tuple(required)
    clock = clock or datetime.now

    def parse(record: Any) -> Dict[str, Any]:
        fields = dict(record) if isinstance(record, Mapping) else dict(vars(record))

        missing = [name for name in required if fields.get(name) is None]
        if missing:
            raise PreconditionFailedError(
                f"Record must have {', '.join(missing)}", {"missing": missing}
            )

        now = clock()
        for name, fmt in _DATE_FIELDS:
            if fields.get(name) is None:
                fields[name] = now.strftime(fmt)
        return fields

    return parse
