"""Result contract and time accounting shared by every policy.

Two physical costs dominate a disk access:

    - **Seek time** — moving the arm across cylinders.  Modelled as
      linear: ``SEEK_TIME_PER_TRACK`` milliseconds per cylinder.
    - **Rotational latency** — waiting for the sector to spin under the
      head.  The spindle only turns one way, so the wait is always the
      *forward* angular distance from where the head is now to where
      the data sits.  A 7200 RPM drive turns once every 8.33 ms.

Every policy produces a ``Result`` with the same shape, which is what
makes side-by-side comparison meaningful.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from py_disksim.request import DEGREES_PER_REVOLUTION, Request

SEEK_TIME_PER_TRACK = 2  # ms per cylinder
ROTATION_SPEED_MS = 8.33  # ms per revolution (7200 RPM)


def rotational_delay(current_sector: int, target_sector: int) -> float:
    """Return the forward rotational wait between two sectors, in ms.

    Never negative and never the reverse direction: a target just
    *behind* the head costs almost a full revolution.
    """
    diff = (target_sector - current_sector) % DEGREES_PER_REVOLUTION
    return diff / DEGREES_PER_REVOLUTION * ROTATION_SPEED_MS


class StepKind(StrEnum):
    """What a recorded head position represents."""

    START = "start"
    SERVICE = "service"
    BOUNDARY = "boundary"
    JUMP = "jump"


@dataclass(frozen=True)
class Step:
    """One entry of a head trace, tagged with why the head is there."""

    kind: StepKind
    cylinder: int
    request: Request | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict."""
        return {
            "kind": str(self.kind),
            "cylinder": self.cylinder,
            "request": self.request.to_dict() if self.request is not None else None,
        }


@dataclass(frozen=True)
class Result:
    """The outcome of running one policy over one configuration.

    Invariants:
        - ``len(sequence) == len(steps)``.
        - ``sequence[0]`` is the initial head position.
        - ``total_seek_count`` is the sum of absolute successive
          differences in ``sequence``, boundary and jump entries included.
    """

    name: str
    sequence: tuple[int, ...]
    steps: tuple[Step, ...]
    total_seek_count: int
    average_seek_time: float
    total_rotation_time: float
    total_operational_time: float

    @property
    def serviced(self) -> list[Request]:
        """Return the requests in the order they were served."""
        return [s.request for s in self.steps if s.kind is StepKind.SERVICE and s.request is not None]

    @property
    def total_seek_time(self) -> float:
        """Return the seek component of the operational time, in ms."""
        return self.total_seek_count * SEEK_TIME_PER_TRACK

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict."""
        return {
            "name": self.name,
            "sequence": list(self.sequence),
            "steps": [s.to_dict() for s in self.steps],
            "total_seek_count": self.total_seek_count,
            "average_seek_time": self.average_seek_time,
            "total_rotation_time": self.total_rotation_time,
            "total_operational_time": self.total_operational_time,
        }
