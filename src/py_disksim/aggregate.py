"""Ranking policies and summarising the comparison."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from py_disksim.metrics import Result
from py_disksim.policies import POLICY_ORDER, PolicyName

NO_WORKLOAD_TEXT = "Awaiting configuration: no workload is configured."
FCFS_PENALTY_TEXT = "FCFS shows heavy mechanical penalty due to drive-head distance."


@dataclass(frozen=True)
class RankEntry:
    """One row of the ranking table."""

    name: str
    total_seek_count: int
    total_operational_time: float

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict."""
        return {
            "name": self.name,
            "total_seek_count": self.total_seek_count,
            "total_operational_time": self.total_operational_time,
        }


@dataclass(frozen=True)
class Summary:
    """Best and worst policy plus a one-paragraph observation.

    ``best`` and ``worst`` are None when there is no workload.
    """

    best: RankEntry | None
    worst: RankEntry | None
    text: str


def _declaration_index(name: str) -> int:
    try:
        return POLICY_ORDER.index(PolicyName(name))
    except ValueError:
        return len(POLICY_ORDER)


def rank(results: Mapping[str, Result]) -> list[RankEntry]:
    """Return entries sorted by total operational time, fastest first.

    Equal times keep declaration order (FCFS, SSTF, SCAN, C-SCAN,
    LOOK, C-LOOK) whatever order *results* arrives in.
    """
    entries = [
        RankEntry(
            name=str(name),
            total_seek_count=result.total_seek_count,
            total_operational_time=result.total_operational_time,
        )
        for name, result in results.items()
    ]
    entries.sort(key=lambda e: _declaration_index(e.name))
    entries.sort(key=lambda e: e.total_operational_time)
    return entries


def summarize(results: Mapping[str, Result], *, request_count: int) -> Summary:
    """Describe the best and worst policies in a sentence or two.

    With no requests every policy costs zero, so instead of ranking a
    tie the summary says that no workload is configured.
    """
    if request_count == 0 or not results:
        return Summary(best=None, worst=None, text=NO_WORKLOAD_TEXT)

    ranked = rank(results)
    best, worst = ranked[0], ranked[-1]
    text = (
        f"Simulation identifies {best.name} as peak efficiency, "
        f"clocking {best.total_operational_time:.1f}ms total operational time."
    )
    if worst.name == PolicyName.FCFS:
        text += f" {FCFS_PENALTY_TEXT}"
    else:
        text += f" {worst.name} trails at {worst.total_operational_time:.1f}ms."
    return Summary(best=best, worst=worst, text=text)
