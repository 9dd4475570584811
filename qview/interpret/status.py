import enum
from typing import Dict, Tuple


@enum.unique
class JobStatus(enum.Enum):
    RUNNING = "running"
    PENDING = "pending"
    HELD = "held"
    SUSPENDED = "suspended"
    ERROR = "error"
    DELETED = "deleted"
    UNKNOWN = "unknown"

    @property
    def is_running(self) -> bool:
        return self is JobStatus.RUNNING


"""
Grid Engine reports state as letter combinations. Several combinations mean the
same thing to us, e.g. "d" prefixes a pending deletion, "h" a hold, "R" a
restart and "E" an error. Anything missing from this table is UNKNOWN.
"""
_ALIASES: Dict[JobStatus, Tuple[str, ...]] = {
    JobStatus.RUNNING: ("r", "t", "Rr", "Rt"),
    JobStatus.PENDING: ("qw", "wq"),
    JobStatus.HELD: ("hRqw", "hqw", "hRwq", "hwq"),
    JobStatus.SUSPENDED: ("s", "S", "ts", "tS", "T", "tT"),
    JobStatus.ERROR: ("Eqw", "Ehqw", "EhRqw"),
    JobStatus.DELETED: ("dr", "dt", "dRr", "dRt", "ds", "dT", "dRs", "dRS", "dRT"),
    JobStatus.UNKNOWN: (),
}

from_qstat_state: Dict[str, JobStatus] = {
    alias: status for status, aliases in _ALIASES.items() for alias in aliases
}

to_display_token: Dict[JobStatus, str] = {
    JobStatus.RUNNING: "r",
    JobStatus.PENDING: "qw",
    JobStatus.HELD: "h",
    JobStatus.SUSPENDED: "s",
    JobStatus.ERROR: "e",
    JobStatus.DELETED: "d",
    JobStatus.UNKNOWN: "?",
}


def classify(_v: str) -> JobStatus:
    """
    "r" -> JobStatus.RUNNING
    "dRr" -> JobStatus.DELETED
    "zz" -> JobStatus.UNKNOWN
    """
    return from_qstat_state.get(_v, JobStatus.UNKNOWN)


def canonical_token(_status: JobStatus) -> str:
    return to_display_token[_status]


def aliases(_status: JobStatus) -> Tuple[str, ...]:
    return _ALIASES[_status]
