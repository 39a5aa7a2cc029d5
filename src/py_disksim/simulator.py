"""The simulator — one owner for configuration, results and playback.

The presentation layer never touches the engine directly.  It talks
to a ``DiskSimulator``, which holds:

    - the current ``RunConfiguration`` (head, disk size, direction,
      requests),
    - the six ``Result`` objects computed from it,
    - the ``PlaybackController`` stepping through those results,
    - the event ``Logger``.

Every mutation follows the same path: build a new validated
configuration, recompute all six results from scratch, and rewind
playback to idle at step 0.  A stale step is never shown against a
changed configuration, and because the policies are pure the
recomputation always yields identical results for identical input.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
from itertools import count
from typing import Any

from py_disksim.aggregate import RankEntry, Summary, rank, summarize
from py_disksim.logging import Logger, LogLevel
from py_disksim.metrics import Result
from py_disksim.playback import PlaybackController, PlaybackState
from py_disksim.policies import DEFAULT_DISK_SIZE, POLICY_ORDER, PolicyName, compute_all
from py_disksim.request import ConfigurationError, Direction, Request, RunConfiguration
from py_disksim.workload import (
    DEFAULT_INITIAL_HEAD,
    MANUAL_SECTOR_STRIDE,
    PRESET_SECTOR_STRIDE,
    build_requests,
    default_requests,
    find_preset,
    sector_for,
)

DEFAULT_LOG_CAPACITY = 10


class DiskSimulator:
    """Compare the six policies over one editable workload."""

    def __init__(
        self,
        *,
        initial_head: int = DEFAULT_INITIAL_HEAD,
        disk_size: int = DEFAULT_DISK_SIZE,
        direction: Direction = Direction.RIGHT,
        requests: Iterable[Request] | None = None,
        log_capacity: int | None = DEFAULT_LOG_CAPACITY,
    ) -> None:
        """Create a simulator, starting from the textbook workload by default.

        Raises:
            ConfigurationError: If the initial configuration is invalid.

        """
        self._logger = Logger(capacity=log_capacity)
        self._playback = PlaybackController()
        self._ids = count(1)
        self._config = RunConfiguration(
            initial_head=initial_head,
            disk_size=disk_size,
            direction=direction,
            requests=tuple(default_requests() if requests is None else requests),
        )
        self._results: dict[PolicyName, Result] = {}
        self._recompute()

    # -- Read-only views -------------------------------------------------------

    @property
    def config(self) -> RunConfiguration:
        """Return the current configuration."""
        return self._config

    @property
    def requests(self) -> list[Request]:
        """Return the current requests in arrival order."""
        return list(self._config.requests)

    @property
    def results(self) -> dict[PolicyName, Result]:
        """Return the six results keyed by policy name."""
        return dict(self._results)

    @property
    def playback(self) -> PlaybackController:
        """Return the playback controller."""
        return self._playback

    @property
    def logger(self) -> Logger:
        """Return the event log."""
        return self._logger

    @property
    def step(self) -> int:
        """Return the current playback step."""
        return self._playback.step

    def result_for(self, name: str) -> Result:
        """Return the result of the policy called *name*.

        Raises:
            ValueError: If *name* is not a policy name.

        """
        return self._results[PolicyName(name)]

    def positions(self) -> dict[PolicyName, int]:
        """Return every policy's displayed head cylinder at the current step."""
        return {name: self._playback.position_for(result) for name, result in self._results.items()}

    def current_position_for(self, name: str, step: int | None = None) -> int:
        """Return the displayed cylinder for one policy at *step*."""
        return self._playback.position_for(self.result_for(name), step)

    def chart_rows(self) -> list[dict[str, int]]:
        """Return one row per step up to the current one.

        Each row maps ``"step"`` (1-based) and every policy name to the
        held head position at that step.
        """
        rows: list[dict[str, int]] = []
        for i in range(self._playback.step + 1):
            row: dict[str, int] = {"step": i + 1}
            for name, result in self._results.items():
                row[str(name)] = self._playback.position_for(result, i)
            rows.append(row)
        return rows

    def ranking(self) -> list[RankEntry]:
        """Return the policies ranked by total operational time."""
        return rank(self._results)

    def summary(self) -> Summary:
        """Return the best/worst observation for the current workload."""
        return summarize(self._results, request_count=len(self._config.requests))

    # -- Workload mutations ----------------------------------------------------

    def add_request(self, cylinder: int) -> Request:
        """Queue a request for *cylinder* with a derived sector.

        Raises:
            ConfigurationError: If *cylinder* is outside ``[0, disk_size)``.

        """
        if not 0 <= cylinder < self._config.disk_size:
            self._log(LogLevel.WARNING, f"Rejected track {cylinder}", source="workload")
            msg = f"Cylinder {cylinder} outside [0, {self._config.disk_size})"
            raise ConfigurationError(msg)
        existing = self._config.requests
        request = Request(
            id=self._fresh_id(existing),
            cylinder=cylinder,
            sector=sector_for(len(existing), stride=MANUAL_SECTOR_STRIDE),
        )
        self._apply(replace(self._config, requests=(*existing, request)))
        self._log(LogLevel.SUCCESS, f"Request queued: Track {cylinder}", source="workload")
        return request

    def remove_request(self, request_id: str) -> Request:
        """Remove the request with *request_id* and return it.

        Raises:
            KeyError: If no request has that id.

        """
        for request in self._config.requests:
            if request.id == request_id:
                break
        else:
            msg = f"No request with id '{request_id}'"
            raise KeyError(msg)
        remaining = tuple(r for r in self._config.requests if r.id != request_id)
        self._apply(replace(self._config, requests=remaining))
        self._log(LogLevel.INFO, f"Request removed: Track {request.cylinder}", source="workload")
        return request

    def clear_requests(self) -> None:
        """Drop every request."""
        self._apply(replace(self._config, requests=()))
        self._log(LogLevel.WARNING, "Request queue purged", source="workload")

    def load_preset(self, name: str) -> list[Request]:
        """Replace the workload with the preset called *name*.

        Raises:
            ValueError: If no preset has that name.
            ConfigurationError: If a preset cylinder does not fit the disk.

        """
        preset = find_preset(name)
        requests = build_requests(preset.cylinders, prefix=f"p{next(self._ids)}", stride=PRESET_SECTOR_STRIDE)
        self._apply(replace(self._config, requests=requests))
        self._log(LogLevel.SUCCESS, f"Preset loaded: {preset.name}", source="workload")
        return list(requests)

    def configure(
        self,
        *,
        initial_head: int | None = None,
        disk_size: int | None = None,
        direction: Direction | str | None = None,
    ) -> RunConfiguration:
        """Change any of head, disk size and direction in one step.

        Raises:
            ConfigurationError: If the resulting configuration is invalid;
                the previous configuration is kept.

        """
        changes: dict[str, Any] = {}
        if initial_head is not None:
            changes["initial_head"] = initial_head
        if disk_size is not None:
            changes["disk_size"] = disk_size
        if direction is not None:
            changes["direction"] = Direction(direction)
        if not changes:
            return self._config
        self._apply(replace(self._config, **changes))
        described = ", ".join(f"{k}={v}" for k, v in changes.items())
        self._log(LogLevel.INFO, f"Configuration changed: {described}", source="config")
        return self._config

    def set_initial_head(self, cylinder: int) -> None:
        """Move the starting head position."""
        self.configure(initial_head=cylinder)

    def set_disk_size(self, size: int) -> None:
        """Resize the disk."""
        self.configure(disk_size=size)

    def set_direction(self, direction: Direction | str) -> None:
        """Change the initial sweep direction."""
        self.configure(direction=direction)

    def restore(self, snapshot: dict[str, Any]) -> None:
        """Replace the whole configuration from a ``snapshot()`` dict.

        Raises:
            ConfigurationError: If the snapshot holds invalid values.

        """
        self._apply(RunConfiguration.from_dict(snapshot))
        self._log(LogLevel.INFO, "Configuration restored", source="config")

    def snapshot(self) -> dict[str, Any]:
        """Return the configuration as a plain dict."""
        return self._config.to_dict()

    # -- Playback --------------------------------------------------------------

    def play(self) -> None:
        """Start playback (rewinding first when at the end)."""
        self._playback.play()
        self._log(LogLevel.INFO, "Playback started", source="playback")

    def pause(self) -> None:
        """Pause playback."""
        self._playback.pause()
        self._log(LogLevel.WARNING, "Playback paused", source="playback")

    def toggle(self) -> PlaybackState:
        """Flip play/pause and return the new state."""
        state = self._playback.toggle()
        if state is PlaybackState.PLAYING:
            self._log(LogLevel.INFO, "Playback started", source="playback")
        else:
            self._log(LogLevel.WARNING, "Playback paused", source="playback")
        return state

    def reset(self) -> None:
        """Rewind to idle at step 0."""
        self._playback.reset()
        self._log(LogLevel.INFO, "Playback reset", source="playback")

    def jump_start(self) -> None:
        """Rewind to step 0, keeping the play/pause mode."""
        self._playback.jump_start()

    def set_speed(self, multiplier: float) -> None:
        """Change the playback speed multiplier.

        Raises:
            ValueError: If the multiplier is not positive.

        """
        self._playback.set_speed(multiplier)
        self._log(LogLevel.DEBUG, f"Playback speed set to {multiplier}x", source="playback")

    def tick(self, elapsed_ms: float) -> int:
        """Feed elapsed time to playback; return steps advanced."""
        was_playing = self._playback.playing
        advanced = self._playback.tick(elapsed_ms)
        if was_playing and not self._playback.playing:
            self._log(LogLevel.SUCCESS, "Playback complete", source="playback")
        return advanced

    # -- Internals -------------------------------------------------------------

    def _apply(self, config: RunConfiguration) -> None:
        """Install a new configuration and recompute everything."""
        self._config = config
        self._recompute()

    def _recompute(self) -> None:
        self._results = compute_all(self._config)
        self._playback.load(self._results[name] for name in POLICY_ORDER)
        if self._config.is_degenerate:
            self._log(LogLevel.WARNING, "No requests configured", source="engine")

    def _fresh_id(self, existing: Iterable[Request]) -> str:
        """Return a ``req-N`` id not used by any of *existing*."""
        taken = {r.id for r in existing}
        candidate = f"req-{next(self._ids)}"
        while candidate in taken:
            candidate = f"req-{next(self._ids)}"
        return candidate

    def _log(self, level: LogLevel, message: str, *, source: str) -> None:
        self._logger.log(level, message, source=source, step=self._playback.step)
