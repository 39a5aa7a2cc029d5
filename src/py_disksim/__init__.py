"""PyDiskSim — compare classic disk scheduling policies step by step.

Re-exports public symbols so callers can write::

    from py_disksim import DiskSimulator, RunConfiguration, compute_all
"""

from py_disksim.aggregate import RankEntry, Summary, rank, summarize
from py_disksim.logging import LogEntry, Logger, LogLevel
from py_disksim.metrics import (
    ROTATION_SPEED_MS,
    SEEK_TIME_PER_TRACK,
    Result,
    Step,
    StepKind,
    rotational_delay,
)
from py_disksim.playback import BASE_INTERVAL_MS, PlaybackController, PlaybackState, position_at
from py_disksim.policies import (
    POLICY_ORDER,
    CLOOKPolicy,
    CSCANPolicy,
    DiskPolicy,
    FCFSPolicy,
    HeadWalk,
    LOOKPolicy,
    PolicyName,
    SCANPolicy,
    SSTFPolicy,
    clook,
    compute_all,
    cscan,
    fcfs,
    look,
    policy_for,
    scan,
    sstf,
)
from py_disksim.request import ConfigurationError, Direction, Request, RunConfiguration
from py_disksim.simulator import DiskSimulator
from py_disksim.workload import PRESETS, Preset

__all__ = [
    "BASE_INTERVAL_MS",
    "POLICY_ORDER",
    "PRESETS",
    "ROTATION_SPEED_MS",
    "SEEK_TIME_PER_TRACK",
    "CLOOKPolicy",
    "CSCANPolicy",
    "ConfigurationError",
    "Direction",
    "DiskPolicy",
    "DiskSimulator",
    "FCFSPolicy",
    "HeadWalk",
    "LOOKPolicy",
    "LogEntry",
    "LogLevel",
    "Logger",
    "PlaybackController",
    "PlaybackState",
    "PolicyName",
    "Preset",
    "RankEntry",
    "Request",
    "Result",
    "RunConfiguration",
    "SCANPolicy",
    "SSTFPolicy",
    "Step",
    "StepKind",
    "Summary",
    "clook",
    "compute_all",
    "cscan",
    "fcfs",
    "look",
    "policy_for",
    "position_at",
    "rank",
    "rotational_delay",
    "scan",
    "sstf",
    "summarize",
]
