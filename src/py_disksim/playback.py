"""Playback controller — stepping every policy's trace in lockstep.

The comparison view replays all six head traces side by side.  A
single step counter drives them together: step ``i`` shows where each
policy's head was after its ``i``-th move.

The controller works like a programmable interval timer.  The
caller feeds it elapsed time through ``tick()``; every time the
accumulated time reaches the interval (``BASE_INTERVAL_MS / speed``)
the controller advances exactly one step.  When the last step is
reached, playback stops by itself.

Traces have different lengths (SCAN and C-SCAN insert edge steps,
for instance).  A policy that has already finished keeps reporting
its final cylinder so it stays visible for comparison; see
``position_at``.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from enum import StrEnum

from py_disksim.metrics import Result

BASE_INTERVAL_MS = 800
SPEED_CHOICES = (0.5, 1, 2, 4)
DEFAULT_SPEED = 1


class PlaybackState(StrEnum):
    """Whether the step counter is advancing."""

    IDLE = "idle"
    PLAYING = "playing"


def position_at(result: Result, step: int) -> int:
    """Return the head cylinder *result* shows at *step*.

    A trace shorter than ``step + 1`` holds its last position.
    Negative steps clamp to the start.
    """
    index = min(max(step, 0), len(result.sequence) - 1)
    return result.sequence[index]


class PlaybackController:
    """A step counter bounded by the longest trace.

    Lifecycle: idle at step 0, advance on each interval while
    playing, stop at the last step.  Loading new results always puts
    the controller back to idle at step 0.
    """

    def __init__(self, *, speed: float = DEFAULT_SPEED) -> None:
        """Create an idle controller with nothing loaded."""
        self._step = 0
        self._max_step = 0
        self._state = PlaybackState.IDLE
        self._speed = DEFAULT_SPEED
        self._elapsed = 0.0
        self.set_speed(speed)

    @property
    def step(self) -> int:
        """Return the current step."""
        return self._step

    @property
    def max_step(self) -> int:
        """Return the last reachable step."""
        return self._max_step

    @property
    def state(self) -> PlaybackState:
        """Return IDLE or PLAYING."""
        return self._state

    @property
    def playing(self) -> bool:
        """Return True while the counter is advancing."""
        return self._state is PlaybackState.PLAYING

    @property
    def at_end(self) -> bool:
        """Return True when the counter sits on the last step."""
        return self._step >= self._max_step

    @property
    def speed(self) -> float:
        """Return the speed multiplier."""
        return self._speed

    @property
    def interval_ms(self) -> float:
        """Return the time between advances at the current speed."""
        return BASE_INTERVAL_MS / self._speed

    def set_speed(self, multiplier: float) -> None:
        """Change the speed multiplier.

        Args:
            multiplier: New multiplier (must be > 0).

        Raises:
            ValueError: If the multiplier is not positive.

        """
        if multiplier <= 0:
            msg = f"Speed must be positive, got {multiplier}"
            raise ValueError(msg)
        self._speed = multiplier

    def load(self, results: Iterable[Result]) -> None:
        """Bound the counter by *results* and rewind to idle at 0."""
        self._max_step = max((len(r.sequence) - 1 for r in results), default=0)
        self.reset()

    def play(self) -> None:
        """Start advancing, rewinding first if already at the end."""
        if self.at_end:
            self._step = 0
        self._elapsed = 0.0
        self._state = PlaybackState.PLAYING

    def pause(self) -> None:
        """Stop advancing; the step is kept."""
        self._state = PlaybackState.IDLE

    def toggle(self) -> PlaybackState:
        """Flip between playing and paused; return the new state.

        From the last step this rewinds to 0 before flipping.
        """
        if self.playing:
            if self.at_end:
                self._step = 0
            self.pause()
        else:
            self.play()
        return self._state

    def reset(self) -> None:
        """Go back to idle at step 0."""
        self._step = 0
        self._elapsed = 0.0
        self._state = PlaybackState.IDLE

    def jump_start(self) -> None:
        """Go back to step 0 without changing play/pause mode."""
        self._step = 0
        self._elapsed = 0.0

    def seek(self, step: int) -> int:
        """Move to *step*, clamped into ``[0, max_step]``; return it."""
        self._step = min(max(step, 0), self._max_step)
        return self._step

    def advance(self) -> bool:
        """Advance one step if playing.

        At the last step the controller stops instead of advancing.

        Returns:
            True if the step counter moved, False otherwise.

        """
        if not self.playing:
            return False
        if self.at_end:
            self.pause()
            return False
        self._step += 1
        return True

    def tick(self, elapsed_ms: float) -> int:
        """Feed elapsed time; advance once per full interval.

        Ticks while idle are ignored, as are negative or non-finite
        elapsed times.  Playback that runs out of steps stops and
        discards the remaining time.

        Returns:
            Number of steps advanced during this tick.

        """
        if not self.playing or not math.isfinite(elapsed_ms) or elapsed_ms < 0:
            return 0
        self._elapsed += elapsed_ms
        advanced = 0
        while self.playing and self._elapsed >= self.interval_ms:
            self._elapsed -= self.interval_ms
            if self.advance():
                advanced += 1
        if not self.playing:
            self._elapsed = 0.0
        return advanced

    def position_for(self, result: Result, step: int | None = None) -> int:
        """Return the cylinder *result* shows at *step* (default: current)."""
        return position_at(result, self._step if step is None else step)
