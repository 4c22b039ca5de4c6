# atlas/services/scheduling/window.py
"""Value types shared by the resolver, the generator and the committer"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from atlas.core.exceptions import InvalidArgumentError
from atlas.utils.time_utils import format_minutes, to_minutes


@dataclass(frozen=True)
class BreakInterval:
    """Half-open [start, end) in minutes since midnight"""
    start: int
    end: int

    @property
    def is_empty(self) -> bool:
        return self.end <= self.start

    @classmethod
    def parse(cls, raw: Any) -> "BreakInterval":
        if isinstance(raw, BreakInterval):
            return raw
        if isinstance(raw, dict):
            return cls(start=to_minutes(raw.get("start")), end=to_minutes(raw.get("end")))
        if isinstance(raw, (tuple, list)) and len(raw) == 2:
            return cls(start=to_minutes(raw[0]), end=to_minutes(raw[1]))
        raise InvalidArgumentError(f"Invalid break interval: {raw!r}")

    def to_dict(self) -> Dict[str, str]:
        return {"start": format_minutes(self.start), "end": format_minutes(self.end)}


def parse_breaks(raw_breaks: Optional[Iterable[Any]]) -> Tuple[BreakInterval, ...]:
    return tuple(BreakInterval.parse(item) for item in (raw_breaks or ()))


@dataclass(frozen=True)
class DaySchedule:
    """Effective working window of one business on one date"""
    is_open: bool
    open_time: int = 0
    close_time: int = 0
    breaks: Tuple[BreakInterval, ...] = field(default_factory=tuple)
    source: str = "weekly"  # "weekly" or "override"

    @classmethod
    def closed(cls, source: str = "weekly") -> "DaySchedule":
        return cls(is_open=False, source=source)

    @classmethod
    def open(cls, open_time, close_time, breaks: Optional[Iterable[Any]] = None,
             source: str = "weekly") -> "DaySchedule":
        return cls(
            is_open=True,
            open_time=to_minutes(open_time),
            close_time=to_minutes(close_time),
            breaks=parse_breaks(breaks),
            source=source,
        )

    def to_dict(self) -> Dict[str, Any]:
        if not self.is_open:
            return {"isOpen": False, "source": self.source}
        return {
            "isOpen": True,
            "openTime": format_minutes(self.open_time),
            "closeTime": format_minutes(self.close_time),
            "breaks": [b.to_dict() for b in self.breaks],
            "source": self.source,
        }

    def blocked_intervals(self) -> List[BreakInterval]:
        return [b for b in self.breaks if not b.is_empty]
