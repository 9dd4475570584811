from .node import (
    CoreSpec,
    granted_host_index,
    node_index,
    pe_task_index,
    placement_index,
)
from .status import JobStatus, canonical_token, classify
from .time import timepoint_datetime

__all__ = [
    "canonical_token",
    "classify",
    "CoreSpec",
    "granted_host_index",
    "JobStatus",
    "node_index",
    "pe_task_index",
    "placement_index",
    "timepoint_datetime",
]
