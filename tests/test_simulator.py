"""Tests for the simulator — workload editing, recomputation and playback.

The simulator is the single place the presentation layer mutates.
Every change recomputes all six results and rewinds playback, so a
stale step is never shown against a changed configuration.
"""

import pytest

from py_disksim.aggregate import NO_WORKLOAD_TEXT
from py_disksim.logging import LogLevel
from py_disksim.playback import BASE_INTERVAL_MS, PlaybackState
from py_disksim.policies import POLICY_ORDER, PolicyName
from py_disksim.request import ConfigurationError, Direction, Request
from py_disksim.simulator import DEFAULT_LOG_CAPACITY, DiskSimulator
from py_disksim.workload import DEFAULT_CYLINDERS, PRESETS, find_preset

_HEAD = 50
_DISK_SIZE = 200
_NEW_CYLINDER = 120
_NEW_SECTOR = 320  # ninth request: (8 * 40) % 360
_SCAN_RIGHT_TOTAL = 334


def _playing_mid_way(sim: DiskSimulator) -> None:
    """Start playback and advance a couple of steps."""
    sim.play()
    sim.tick(BASE_INTERVAL_MS * 2)


class TestDefaults:
    """A fresh simulator starts from the textbook workload."""

    def test_default_configuration(self) -> None:
        """Head 50 on a 200-cylinder disk sweeping right."""
        sim = DiskSimulator()
        assert sim.config.initial_head == _HEAD
        assert sim.config.disk_size == _DISK_SIZE
        assert sim.config.direction is Direction.RIGHT
        assert [r.cylinder for r in sim.requests] == list(DEFAULT_CYLINDERS)

    def test_default_sectors(self) -> None:
        """Default requests are spread 45 degrees apart."""
        sim = DiskSimulator()
        assert [r.sector for r in sim.requests] == [0, 45, 90, 135, 180, 225, 270, 315]

    def test_six_results(self) -> None:
        """All six policies are computed up front."""
        sim = DiskSimulator()
        assert list(sim.results) == list(POLICY_ORDER)
        assert sim.result_for("SCAN").total_seek_count == _SCAN_RIGHT_TOTAL

    def test_custom_requests(self) -> None:
        """Explicit requests replace the default workload."""
        sim = DiskSimulator(requests=[Request(id="x", cylinder=10)])
        assert [r.id for r in sim.requests] == ["x"]

    def test_invalid_initial_config(self) -> None:
        """A bad starting configuration fails fast."""
        with pytest.raises(ConfigurationError):
            DiskSimulator(initial_head=500)


class TestRequests:
    """Queueing and removing requests."""

    def test_add_request(self) -> None:
        """A new request gets a fresh id and a derived sector."""
        sim = DiskSimulator()
        req = sim.add_request(_NEW_CYLINDER)
        assert req.cylinder == _NEW_CYLINDER
        assert req.sector == _NEW_SECTOR
        assert sim.requests[-1] == req

    def test_add_request_ids_unique(self) -> None:
        """Two requests for the same cylinder get different ids."""
        sim = DiskSimulator()
        first = sim.add_request(_NEW_CYLINDER)
        second = sim.add_request(_NEW_CYLINDER)
        assert first.id != second.id

    def test_add_out_of_range_rejected(self) -> None:
        """Cylinders off the disk are rejected and logged."""
        sim = DiskSimulator()
        with pytest.raises(ConfigurationError, match="outside"):
            sim.add_request(_DISK_SIZE)
        assert len(sim.requests) == len(DEFAULT_CYLINDERS)
        assert sim.logger.filter(min_level=LogLevel.WARNING)

    def test_add_request_recomputes(self) -> None:
        """Results reflect the new request immediately."""
        sim = DiskSimulator()
        sim.add_request(_NEW_CYLINDER)
        assert _NEW_CYLINDER in sim.result_for("FCFS").sequence

    def test_remove_request(self) -> None:
        """Removing by id drops exactly that request."""
        sim = DiskSimulator()
        target = sim.requests[0]
        removed = sim.remove_request(target.id)
        assert removed == target
        assert target not in sim.requests

    def test_remove_unknown_request(self) -> None:
        """Unknown ids raise KeyError."""
        sim = DiskSimulator()
        with pytest.raises(KeyError):
            sim.remove_request("nope")

    def test_clear_requests(self) -> None:
        """Purging leaves a zero-cost, unranked workload."""
        sim = DiskSimulator()
        sim.clear_requests()
        assert sim.requests == []
        assert all(r.total_operational_time == 0 for r in sim.results.values())
        assert sim.summary().text == NO_WORKLOAD_TEXT


class TestPresets:
    """Loading named workloads."""

    def test_load_preset(self) -> None:
        """A preset replaces the workload with 30-degree sector spacing."""
        sim = DiskSimulator()
        loaded = sim.load_preset("Cluster")
        assert [r.cylinder for r in loaded] == list(find_preset("Cluster").cylinders)
        assert [r.sector for r in loaded] == [0, 30, 60, 90, 120, 150]
        assert sim.requests == loaded

    def test_preset_name_case_insensitive(self) -> None:
        """Preset lookup ignores case."""
        sim = DiskSimulator()
        sim.load_preset("ping-pong")
        assert sim.requests[0].cylinder == PRESETS[0].cylinders[0]

    def test_reloading_preset_gives_new_ids(self) -> None:
        """Loading the same preset twice never reuses ids."""
        sim = DiskSimulator()
        first = sim.load_preset("Chaos")
        second = sim.load_preset("Chaos")
        assert {r.id for r in first}.isdisjoint(r.id for r in second)

    def test_unknown_preset(self) -> None:
        """Unknown preset names raise ValueError."""
        sim = DiskSimulator()
        with pytest.raises(ValueError, match="Unknown preset"):
            sim.load_preset("Zigzag")

    def test_preset_too_big_for_disk(self) -> None:
        """A preset that does not fit the disk is rejected."""
        sim = DiskSimulator(disk_size=100, requests=[])
        with pytest.raises(ConfigurationError):
            sim.load_preset("Ping-Pong")
        assert sim.requests == []


class TestConfiguration:
    """Changing head, disk size and direction."""

    def test_set_direction(self) -> None:
        """Direction changes flow into the sweeping policies."""
        sim = DiskSimulator()
        sim.set_direction("left")
        assert sim.config.direction is Direction.LEFT
        assert sim.result_for("SCAN").sequence[1] < _HEAD

    def test_set_initial_head(self) -> None:
        """The head position seeds every trace."""
        sim = DiskSimulator()
        sim.set_initial_head(10)
        assert all(r.sequence[0] == 10 for r in sim.results.values())

    def test_invalid_change_keeps_previous(self) -> None:
        """A rejected change leaves the configuration untouched."""
        sim = DiskSimulator()
        before = sim.config
        with pytest.raises(ConfigurationError):
            sim.set_disk_size(100)  # 183 no longer fits
        assert sim.config == before

    def test_configure_without_changes(self) -> None:
        """Calling configure with nothing to change is a no-op."""
        sim = DiskSimulator()
        assert sim.configure() is sim.config

    def test_snapshot_and_restore(self) -> None:
        """A snapshot restores into an equal configuration."""
        sim = DiskSimulator()
        sim.add_request(_NEW_CYLINDER)
        snapshot = sim.snapshot()
        other = DiskSimulator(requests=[])
        other.restore(snapshot)
        assert other.config == sim.config
        assert other.results == sim.results

    def test_add_after_restore_gets_fresh_id(self) -> None:
        """Requests added after a restore never reuse a restored id."""
        source = DiskSimulator()
        source.add_request(_NEW_CYLINDER)
        target = DiskSimulator(requests=[])
        target.restore(source.snapshot())
        restored_ids = {r.id for r in target.config.requests}
        added = target.add_request(_NEW_CYLINDER + 1)
        assert added.id not in restored_ids
        assert len({r.id for r in target.config.requests}) == len(target.config.requests)


class TestMutationResetsPlayback:
    """Any configuration change forces idle at step 0."""

    def test_add_request_resets(self) -> None:
        """Queueing a request stops playback and rewinds."""
        sim = DiskSimulator()
        _playing_mid_way(sim)
        assert sim.step > 0
        sim.add_request(_NEW_CYLINDER)
        assert sim.step == 0
        assert sim.playback.state is PlaybackState.IDLE

    def test_direction_change_resets(self) -> None:
        """Changing direction stops playback and rewinds."""
        sim = DiskSimulator()
        _playing_mid_way(sim)
        sim.set_direction(Direction.LEFT)
        assert sim.step == 0
        assert not sim.playback.playing

    def test_max_step_follows_results(self) -> None:
        """The playback bound tracks the longest new trace."""
        sim = DiskSimulator()
        sim.clear_requests()
        assert sim.playback.max_step == 0


class TestPlaybackViews:
    """Positions and chart rows follow the shared step."""

    def test_positions_at_start(self) -> None:
        """At step 0 every policy shows the head."""
        sim = DiskSimulator()
        assert set(sim.positions().values()) == {_HEAD}

    def test_positions_follow_step(self) -> None:
        """After one step FCFS shows its first request."""
        sim = DiskSimulator()
        sim.play()
        sim.tick(BASE_INTERVAL_MS)
        assert sim.positions()[PolicyName.FCFS] == DEFAULT_CYLINDERS[0]

    def test_current_position_for_holds_last(self) -> None:
        """Asking past the end of a trace gives its last cylinder."""
        sim = DiskSimulator()
        fcfs = sim.result_for("FCFS")
        assert sim.current_position_for("FCFS", sim.playback.max_step) == fcfs.sequence[-1]

    def test_chart_rows(self) -> None:
        """One row per step up to the current one, with every policy."""
        sim = DiskSimulator()
        sim.play()
        sim.tick(BASE_INTERVAL_MS * 2)
        rows = sim.chart_rows()
        assert [row["step"] for row in rows] == [1, 2, 3]
        assert set(rows[0]) == {"step", *(str(n) for n in POLICY_ORDER)}

    def test_play_to_completion_logged(self) -> None:
        """Running off the end logs completion."""
        sim = DiskSimulator()
        sim.play()
        sim.tick(BASE_INTERVAL_MS * 50)
        assert not sim.playback.playing
        assert sim.logger.entries[-1].message == "Playback complete"

    def test_toggle_logs(self) -> None:
        """Toggling logs start and pause."""
        sim = DiskSimulator()
        sim.toggle()
        sim.toggle()
        assert [e.message for e in sim.logger.entries[-2:]] == ["Playback started", "Playback paused"]


class TestLog:
    """The event log is bounded like a console panel."""

    def test_default_capacity(self) -> None:
        """Only the newest entries survive."""
        sim = DiskSimulator()
        for _ in range(DEFAULT_LOG_CAPACITY + 5):
            sim.add_request(_NEW_CYLINDER)
        assert len(sim.logger) == DEFAULT_LOG_CAPACITY

    def test_empty_workload_warns(self) -> None:
        """Purging the queue logs a no-requests warning."""
        sim = DiskSimulator()
        sim.clear_requests()
        warnings = [e.message for e in sim.logger.filter(min_level=LogLevel.WARNING)]
        assert "No requests configured" in warnings
