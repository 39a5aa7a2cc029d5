"""Workload presets and request construction helpers.

A user builds a workload three ways: typing cylinder numbers one at a
time, loading a named preset, or starting from the classic textbook
example.  Real requests carry a sector as well as a cylinder; these
helpers derive a spread of sectors from the request's position so that
rotational latency varies across the workload without needing a
random source (runs stay reproducible).
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from py_disksim.request import DEGREES_PER_REVOLUTION, Request

DEFAULT_INITIAL_HEAD = 50
DEFAULT_CYLINDERS = (98, 183, 37, 122, 14, 124, 65, 67)

# Degrees between consecutive requests for each way of building a workload
DEFAULT_SECTOR_STRIDE = 45
MANUAL_SECTOR_STRIDE = 40
PRESET_SECTOR_STRIDE = 30


@dataclass(frozen=True)
class Preset:
    """A named, ready-made list of cylinders."""

    name: str
    cylinders: tuple[int, ...]
    description: str = ""


PRESETS: tuple[Preset, ...] = (
    Preset("Ping-Pong", (10, 190, 15, 185, 20, 180), "Extreme span test"),
    Preset("Cluster", (50, 52, 48, 55, 45, 51), "High density area"),
    Preset("Sequential", (10, 20, 30, 40, 50, 60), "Burst direction"),
    Preset("Chaos", (190, 10, 150, 40, 120, 30), "Randomized stress"),
)


def sector_for(index: int, *, stride: int) -> int:
    """Return the sector for the *index*-th request at *stride* degrees."""
    return (index * stride) % DEGREES_PER_REVOLUTION


def build_requests(cylinders: Sequence[int], *, prefix: str, stride: int) -> tuple[Request, ...]:
    """Turn a list of cylinders into requests with derived sectors.

    Ids are ``<prefix>-<index>``.
    """
    return tuple(
        Request(id=f"{prefix}-{i}", cylinder=c, sector=sector_for(i, stride=stride)) for i, c in enumerate(cylinders)
    )


def default_requests() -> tuple[Request, ...]:
    """Return the textbook workload used when nothing else is configured."""
    return build_requests(DEFAULT_CYLINDERS, prefix="init", stride=DEFAULT_SECTOR_STRIDE)


def find_preset(name: str) -> Preset:
    """Look up a preset by name (case-insensitive).

    Raises:
        ValueError: If no preset has that name.

    """
    for preset in PRESETS:
        if preset.name.lower() == name.lower():
            return preset
    known = ", ".join(p.name for p in PRESETS)
    msg = f"Unknown preset '{name}' (known: {known})"
    raise ValueError(msg)
