"""Disk scheduling policies — ordering requests to cut head travel.

When several requests are waiting, the disk arm has to move between
cylinders to serve them, and that movement dominates the cost.  A
disk scheduling policy decides the *order* of service.

Think of the arm like an elevator in a building:
    - **FCFS** — stop at every floor in the order buttons were pressed.
    - **SSTF** — always go to the nearest requested floor (greedy).
    - **SCAN** — ride all the way to the top, then all the way down.
    - **C-SCAN** — ride to the top, drop straight to the ground floor,
      ride up again.
    - **LOOK** — like SCAN, but turn around at the last requested floor
      instead of the roof.
    - **C-LOOK** — like C-SCAN, but drop straight to the lowest
      requested floor instead of the ground.

Every policy shares one accumulator, ``HeadWalk``: the policy decides
where the head goes next, the walk does the seek and rotation
arithmetic and records the trace.  Policies only differ in how they
order the queue and whether they touch the disk edges, so the timing
maths lives in exactly one place.

All policies implement the ``DiskPolicy`` protocol (Strategy pattern).
Each is also exposed as a plain function — ``fcfs``, ``sstf``,
``scan``, ``cscan``, ``look``, ``clook`` — for callers that don't need
the object.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from enum import StrEnum
from typing import Protocol

from py_disksim.metrics import SEEK_TIME_PER_TRACK, Result, Step, StepKind, rotational_delay
from py_disksim.request import Direction, Request, RunConfiguration

DEFAULT_DISK_SIZE = 200


class PolicyName(StrEnum):
    """The six policy names, in declaration order."""

    FCFS = "FCFS"
    SSTF = "SSTF"
    SCAN = "SCAN"
    CSCAN = "C-SCAN"
    LOOK = "LOOK"
    CLOOK = "C-LOOK"


POLICY_ORDER: tuple[PolicyName, ...] = tuple(PolicyName)


class HeadWalk:
    """Move a head around the disk, accounting seek and rotation.

    The walk starts at ``head`` with the sector at 0 (a head that has
    not served anything yet has no meaningful rotational position).
    ``serve`` visits a request and pays both seek and rotation;
    ``move`` is a non-servicing hop (edge touch or wrap jump) that pays
    seek only and leaves the sector alone.
    """

    def __init__(self, head: int) -> None:
        """Start a walk at cylinder *head*."""
        self._cylinder = head
        self._sector = 0
        self._seek_count = 0
        self._rotation_time = 0.0
        self._sequence: list[int] = [head]
        self._steps: list[Step] = [Step(kind=StepKind.START, cylinder=head)]

    @property
    def cylinder(self) -> int:
        """Return the cylinder the head is on now."""
        return self._cylinder

    def serve(self, request: Request) -> None:
        """Seek to *request*, wait for its sector, and record it."""
        self._seek_count += abs(request.cylinder - self._cylinder)
        self._rotation_time += rotational_delay(self._sector, request.sector)
        self._cylinder = request.cylinder
        self._sector = request.sector
        self._sequence.append(request.cylinder)
        self._steps.append(Step(kind=StepKind.SERVICE, cylinder=request.cylinder, request=request))

    def serve_all(self, queue: Iterable[Request]) -> None:
        """Serve every request in *queue* in order."""
        for request in queue:
            self.serve(request)

    def move(self, cylinder: int, *, kind: StepKind) -> None:
        """Move the head without serving anything."""
        self._seek_count += abs(cylinder - self._cylinder)
        self._cylinder = cylinder
        self._sequence.append(cylinder)
        self._steps.append(Step(kind=kind, cylinder=cylinder))

    def result(self, name: str, *, request_count: int) -> Result:
        """Freeze the walk into a ``Result``.

        The average divides by the number of real requests; an empty
        workload divides by one so every total stays zero.
        """
        seek_time = self._seek_count * SEEK_TIME_PER_TRACK
        return Result(
            name=name,
            sequence=tuple(self._sequence),
            steps=tuple(self._steps),
            total_seek_count=self._seek_count,
            average_seek_time=self._seek_count / max(1, request_count),
            total_rotation_time=self._rotation_time,
            total_operational_time=seek_time + self._rotation_time,
        )


def _sweep(requests: Iterable[Request], *, ascending: bool) -> list[Request]:
    """Sort by cylinder; equal cylinders keep their arrival order."""
    return sorted(requests, key=lambda r: r.cylinder, reverse=not ascending)


def _partition(
    requests: Sequence[Request], *, head: int, direction: Direction, circular: bool = False
) -> tuple[list[Request], list[Request]]:
    """Split requests into (ahead, behind) relative to the sweep.

    Both halves are sorted nearest-first from the head.  A request
    sitting exactly on the head counts as right of it, except for the
    circular policies sweeping left, which serve it on the way down.
    """
    if direction is Direction.RIGHT:
        ahead = _sweep((r for r in requests if r.cylinder >= head), ascending=True)
        behind = _sweep((r for r in requests if r.cylinder < head), ascending=False)
    elif circular:
        ahead = _sweep((r for r in requests if r.cylinder <= head), ascending=False)
        behind = _sweep((r for r in requests if r.cylinder > head), ascending=True)
    else:
        ahead = _sweep((r for r in requests if r.cylinder < head), ascending=False)
        behind = _sweep((r for r in requests if r.cylinder >= head), ascending=True)
    return ahead, behind


class DiskPolicy(Protocol):
    """Protocol for disk scheduling policies (Strategy pattern)."""

    @property
    def name(self) -> PolicyName:
        """Return the policy's display name."""
        ...  # pragma: no cover

    def compute(self, requests: Sequence[Request], *, head: int) -> Result:
        """Walk the head over *requests* and return the timed trace.

        Args:
            requests: Requests in arrival order (never modified).
            head: Starting cylinder of the disk head.

        Returns:
            The result for this policy.

        """
        ...  # pragma: no cover


class FCFSPolicy:
    """First Come, First Served — service in arrival order.

    The simplest policy.  Fair (no starvation), but the arm zigzags
    across the disk, so it is the baseline every other policy beats
    on unsorted input.
    """

    @property
    def name(self) -> PolicyName:
        """Return 'FCFS'."""
        return PolicyName.FCFS

    def compute(self, requests: Sequence[Request], *, head: int) -> Result:
        """Serve requests exactly in their original order."""
        walk = HeadWalk(head)
        walk.serve_all(requests)
        return walk.result(self.name, request_count=len(requests))


class SSTFPolicy:
    """Shortest Seek Time First — always go to the nearest request.

    A greedy algorithm that minimises the next hop.  Better total
    movement than FCFS, but it can **starve** distant requests if new
    ones keep arriving near the head.

    Tiebreaker: among equally distant requests the one that arrived
    first wins.
    """

    @property
    def name(self) -> PolicyName:
        """Return 'SSTF'."""
        return PolicyName.SSTF

    def compute(self, requests: Sequence[Request], *, head: int) -> Result:
        """Serve nearest-first until nothing is pending."""
        walk = HeadWalk(head)
        pending = list(requests)
        while pending:
            # min() keeps the first index among equal distances
            nearest = min(range(len(pending)), key=lambda i: abs(pending[i].cylinder - walk.cylinder))
            walk.serve(pending.pop(nearest))
        return walk.result(self.name, request_count=len(requests))


class SCANPolicy:
    """SCAN (elevator algorithm) — sweep to the edge, then reverse.

    The arm moves in one direction serving everything on the way.  If
    anything is waiting behind it, the arm keeps going to the disk
    edge before turning round, and that edge visit is recorded as a
    step of its own even though it serves nothing.

    Args:
        direction: Initial sweep direction.
        disk_size: Number of cylinders on the disk.

    """

    def __init__(self, *, direction: Direction = Direction.RIGHT, disk_size: int = DEFAULT_DISK_SIZE) -> None:
        """Create a SCAN policy with an initial direction."""
        self._direction = direction
        self._disk_size = disk_size

    @property
    def name(self) -> PolicyName:
        """Return 'SCAN'."""
        return PolicyName.SCAN

    @property
    def direction(self) -> Direction:
        """Return the initial sweep direction."""
        return self._direction

    def compute(self, requests: Sequence[Request], *, head: int) -> Result:
        """Sweep, touch the edge if a reversal is needed, sweep back."""
        walk = HeadWalk(head)
        ahead, behind = _partition(requests, head=head, direction=self._direction)
        walk.serve_all(ahead)
        if behind:
            edge = self._disk_size - 1 if self._direction is Direction.RIGHT else 0
            walk.move(edge, kind=StepKind.BOUNDARY)
            walk.serve_all(behind)
        return walk.result(self.name, request_count=len(requests))


class CSCANPolicy:
    """Circular SCAN — sweep to the edge, jump to the other edge, repeat.

    C-SCAN only serves in one direction.  After reaching the edge the
    arm returns to the opposite edge without serving anything, then
    carries on in the original direction.  Both the edge touch and the
    wrap jump are recorded, and the jump's distance counts as seek.

    With regular SCAN, cylinders in the middle of the disk get passed
    twice per cycle.  C-SCAN gives every cylinder the same treatment.

    Args:
        direction: Sweep direction.
        disk_size: Number of cylinders on the disk.

    """

    def __init__(self, *, direction: Direction = Direction.RIGHT, disk_size: int = DEFAULT_DISK_SIZE) -> None:
        """Create a C-SCAN policy with sweep direction."""
        self._direction = direction
        self._disk_size = disk_size

    @property
    def name(self) -> PolicyName:
        """Return 'C-SCAN'."""
        return PolicyName.CSCAN

    @property
    def direction(self) -> Direction:
        """Return the sweep direction."""
        return self._direction

    def compute(self, requests: Sequence[Request], *, head: int) -> Result:
        """Sweep, wrap around, and keep sweeping the same way."""
        walk = HeadWalk(head)
        ahead, behind = _partition(requests, head=head, direction=self._direction, circular=True)
        walk.serve_all(ahead)
        if behind:
            rightward = self._direction is Direction.RIGHT
            top = self._disk_size - 1
            edge, far = (top, 0) if rightward else (0, top)
            walk.move(edge, kind=StepKind.BOUNDARY)
            walk.move(far, kind=StepKind.JUMP)
            walk.serve_all(_sweep(behind, ascending=rightward))
        return walk.result(self.name, request_count=len(requests))


class LOOKPolicy:
    """LOOK — SCAN that turns round at the last request, not the edge.

    Same ordering as SCAN, but the arm never travels past the
    outermost pending request, so no edge step is ever inserted.

    Args:
        direction: Initial sweep direction.

    """

    def __init__(self, *, direction: Direction = Direction.RIGHT) -> None:
        """Create a LOOK policy with an initial direction."""
        self._direction = direction

    @property
    def name(self) -> PolicyName:
        """Return 'LOOK'."""
        return PolicyName.LOOK

    @property
    def direction(self) -> Direction:
        """Return the initial sweep direction."""
        return self._direction

    def compute(self, requests: Sequence[Request], *, head: int) -> Result:
        """Sweep, then reverse immediately at the last request."""
        walk = HeadWalk(head)
        ahead, behind = _partition(requests, head=head, direction=self._direction)
        walk.serve_all(ahead)
        walk.serve_all(behind)
        return walk.result(self.name, request_count=len(requests))


class CLOOKPolicy:
    """Circular LOOK — jump straight to the furthest request behind.

    Like C-SCAN, service only happens in one direction.  Like LOOK,
    the edges are never visited: once one side is exhausted, the arm
    jumps directly to the first request that continues the sweep on
    the other side.  That single jump is recorded, landing exactly on
    the request, which is then served with no further seek.

    Args:
        direction: Sweep direction.

    """

    def __init__(self, *, direction: Direction = Direction.RIGHT) -> None:
        """Create a C-LOOK policy with sweep direction."""
        self._direction = direction

    @property
    def name(self) -> PolicyName:
        """Return 'C-LOOK'."""
        return PolicyName.CLOOK

    @property
    def direction(self) -> Direction:
        """Return the sweep direction."""
        return self._direction

    def compute(self, requests: Sequence[Request], *, head: int) -> Result:
        """Sweep, jump to the far side's first request, keep sweeping."""
        walk = HeadWalk(head)
        ahead, behind = _partition(requests, head=head, direction=self._direction, circular=True)
        walk.serve_all(ahead)
        if behind:
            wrapped = _sweep(behind, ascending=self._direction is Direction.RIGHT)
            walk.move(wrapped[0].cylinder, kind=StepKind.JUMP)
            walk.serve_all(wrapped)
        return walk.result(self.name, request_count=len(requests))


# -- Functional entry points ---------------------------------------------------


def fcfs(initial_head: int, requests: Sequence[Request]) -> Result:
    """Compute the FCFS result."""
    return FCFSPolicy().compute(requests, head=initial_head)


def sstf(initial_head: int, requests: Sequence[Request]) -> Result:
    """Compute the SSTF result."""
    return SSTFPolicy().compute(requests, head=initial_head)


def scan(
    initial_head: int,
    requests: Sequence[Request],
    disk_size: int = DEFAULT_DISK_SIZE,
    direction: Direction = Direction.RIGHT,
) -> Result:
    """Compute the SCAN result."""
    return SCANPolicy(direction=direction, disk_size=disk_size).compute(requests, head=initial_head)


def cscan(
    initial_head: int,
    requests: Sequence[Request],
    disk_size: int = DEFAULT_DISK_SIZE,
    direction: Direction = Direction.RIGHT,
) -> Result:
    """Compute the C-SCAN result."""
    return CSCANPolicy(direction=direction, disk_size=disk_size).compute(requests, head=initial_head)


def look(initial_head: int, requests: Sequence[Request], direction: Direction = Direction.RIGHT) -> Result:
    """Compute the LOOK result."""
    return LOOKPolicy(direction=direction).compute(requests, head=initial_head)


def clook(initial_head: int, requests: Sequence[Request], direction: Direction = Direction.RIGHT) -> Result:
    """Compute the C-LOOK result."""
    return CLOOKPolicy(direction=direction).compute(requests, head=initial_head)


def policy_for(
    name: str,
    *,
    disk_size: int = DEFAULT_DISK_SIZE,
    direction: Direction = Direction.RIGHT,
) -> DiskPolicy:
    """Build the policy called *name*.

    Raises:
        ValueError: If *name* is not one of the six policy names.

    """
    match PolicyName(name):
        case PolicyName.FCFS:
            return FCFSPolicy()
        case PolicyName.SSTF:
            return SSTFPolicy()
        case PolicyName.SCAN:
            return SCANPolicy(direction=direction, disk_size=disk_size)
        case PolicyName.CSCAN:
            return CSCANPolicy(direction=direction, disk_size=disk_size)
        case PolicyName.LOOK:
            return LOOKPolicy(direction=direction)
        case PolicyName.CLOOK:
            return CLOOKPolicy(direction=direction)


def compute_all(config: RunConfiguration) -> dict[PolicyName, Result]:
    """Run all six policies over *config*, keyed in declaration order.

    Each policy works on its own copy of the request list, so the
    results are independent of one another and of call order.
    """
    return {
        name: policy_for(name, disk_size=config.disk_size, direction=config.direction).compute(
            config.requests, head=config.initial_head
        )
        for name in POLICY_ORDER
    }
