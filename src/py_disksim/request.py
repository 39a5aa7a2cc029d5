"""Disk requests and run configuration — the input side of the simulator.

A **request** asks the disk to read or write one spot on the platter.
That spot has two coordinates:

    - **cylinder** — which concentric track the head must move to
      (the *seek*).
    - **sector** — where on that track the data lives, measured in
      degrees.  Once the head arrives, it waits for the platter to
      spin the sector underneath it (the *rotational latency*).

A **run configuration** bundles everything one comparison needs: the
starting head position, the disk size, the initial sweep direction,
and the ordered request list.  Every scheduling policy consumes the
same configuration, so their results are directly comparable.

Requests and configurations are frozen dataclasses.  Policies work on
copies and views; nothing ever reorders the caller's request list.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

DEGREES_PER_REVOLUTION = 360


class ConfigurationError(ValueError):
    """Raise when a configuration or request value is out of range."""


class Direction(StrEnum):
    """Which way the head sweeps first."""

    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class Request:
    """One I/O request — a cylinder to seek to and a sector to wait for."""

    id: str
    """Opaque identifier, unique within a run."""

    cylinder: int
    """Track index the head must reach."""

    sector: int = 0
    """Rotational position on the track, in degrees."""

    def __post_init__(self) -> None:
        """Reject negative cylinders and sectors outside one revolution."""
        if self.cylinder < 0:
            msg = f"Cylinder must be non-negative, got {self.cylinder}"
            raise ConfigurationError(msg)
        if not 0 <= self.sector < DEGREES_PER_REVOLUTION:
            msg = f"Sector must be in [0, {DEGREES_PER_REVOLUTION}), got {self.sector}"
            raise ConfigurationError(msg)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict."""
        return {"id": self.id, "cylinder": self.cylinder, "sector": self.sector}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Request:
        """Rebuild a request from ``to_dict`` output."""
        return cls(id=str(data["id"]), cylinder=int(data["cylinder"]), sector=int(data.get("sector", 0)))


@dataclass(frozen=True)
class RunConfiguration:
    """Everything a policy needs to compute one result.

    Validation happens at construction time so that a bad value fails
    fast instead of being clamped into a misleading seek distance.

    Raises:
        ConfigurationError: If the disk size is not positive, the head
            or any request cylinder lies outside ``[0, disk_size)``,
            or two requests share an id.

    """

    initial_head: int
    disk_size: int
    direction: Direction = Direction.RIGHT
    requests: tuple[Request, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Normalise the request container and validate ranges."""
        # Accept any iterable of requests but store an immutable tuple
        object.__setattr__(self, "requests", tuple(self.requests))
        object.__setattr__(self, "direction", Direction(self.direction))

        if self.disk_size <= 0:
            msg = f"Disk size must be positive, got {self.disk_size}"
            raise ConfigurationError(msg)
        if not 0 <= self.initial_head < self.disk_size:
            msg = f"Initial head {self.initial_head} outside [0, {self.disk_size})"
            raise ConfigurationError(msg)

        seen: set[str] = set()
        for req in self.requests:
            if req.cylinder >= self.disk_size:
                msg = f"Request {req.id} cylinder {req.cylinder} outside [0, {self.disk_size})"
                raise ConfigurationError(msg)
            if req.id in seen:
                msg = f"Duplicate request id '{req.id}'"
                raise ConfigurationError(msg)
            seen.add(req.id)

    @property
    def is_degenerate(self) -> bool:
        """Return True when there is no workload to schedule."""
        return not self.requests

    @property
    def max_cylinder(self) -> int:
        """Return the highest addressable cylinder."""
        return self.disk_size - 1

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict (the snapshot handed to callers)."""
        return {
            "initial_head": self.initial_head,
            "disk_size": self.disk_size,
            "direction": str(self.direction),
            "requests": [r.to_dict() for r in self.requests],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RunConfiguration:
        """Rebuild a configuration from ``to_dict`` output.

        Raises:
            ConfigurationError: If the restored values are invalid.

        """
        return cls(
            initial_head=int(data["initial_head"]),
            disk_size=int(data["disk_size"]),
            direction=Direction(data.get("direction", Direction.RIGHT)),
            requests=tuple(Request.from_dict(r) for r in data.get("requests", [])),
        )
