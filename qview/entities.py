"""
Entities live for one run. A job refers to the queues it uses by identity hash,
and queues never refer back to jobs; per-queue job lists are computed by
filtering.
"""

from __future__ import annotations

import datetime as dt
import hashlib
from typing import List, NamedTuple, Optional, Tuple

from qview.interpret import CoreSpec, JobStatus, canonical_token
from qview.interpret._common import UNKNOWN_INDEX

RANGE = Tuple[int, int]


class Job:
    def __init__(
        self,
        number: int = 0,
        priority: float = 0.0,
        name: str = "",
        user: str = "",
        status: JobStatus = JobStatus.UNKNOWN,
        time: Optional[dt.datetime] = None,
        host: str = "",
    ) -> None:
        self._number: int = number
        self._priority: float = priority
        self._name: str = name
        self._user: str = user
        self._status: JobStatus = status
        self._time: Optional[dt.datetime] = time
        self._host: str = host
        self._core: CoreSpec = CoreSpec.from_host_spec(host)

        self._queue_name: str = ""
        self._slots: int = 0
        self._node_indices: List[int] = []
        self._queue_hashes: List[str] = []

    def __repr__(self) -> str:
        return f"Job({self._number}, {self._name!r}, {self._user!r}, {self.status_token})"

    @property
    def number(self) -> int:
        return self._number

    @property
    def priority(self) -> float:
        return self._priority

    @property
    def name(self) -> str:
        return self._name

    @property
    def user(self) -> str:
        return self._user

    @property
    def status(self) -> JobStatus:
        return self._status

    @property
    def status_token(self) -> str:
        return canonical_token(self._status)

    @property
    def time(self) -> Optional[dt.datetime]:
        return self._time

    @property
    def host(self) -> str:
        return self._host

    @property
    def core_name(self) -> str:
        return self._core.name

    @property
    def core_number(self) -> int:
        return self._core.number

    @property
    def queue_name(self) -> str:
        return self._queue_name

    @property
    def slots(self) -> int:
        return self._slots

    @property
    def node_indices(self) -> List[int]:
        return self._node_indices.copy()

    @property
    def queue_hashes(self) -> List[str]:
        return self._queue_hashes.copy()

    @property
    def is_of_interest(self) -> bool:
        return len(self._queue_hashes) > 0

    def contains_node(self, index: int) -> bool:
        return index in self._node_indices

    def add_node_index(self, index: int) -> None:
        if index not in self._node_indices:
            self._node_indices.append(index)

    def belongs_to(self, queue_hash: str) -> bool:
        return queue_hash in self._queue_hashes

    def add_queue_hash(self, queue_hash: str) -> None:
        if queue_hash not in self._queue_hashes:
            self._queue_hashes.append(queue_hash)

    def merge_detail(self, detail: JobDetail) -> None:
        """
        The listing truncates names, so a non-empty detail name replaces it.
        """
        if detail.job_name:
            self._name = detail.job_name
        self._queue_name = detail.queue_name
        self._slots = detail.slots
        for index in detail.node_indices:
            self.add_node_index(index)


class JobDetail(NamedTuple):
    queue_name: str
    slots: int
    job_name: str
    node_indices: List[int]

    @classmethod
    def empty(cls) -> JobDetail:
        return cls("", 0, "", [])


class QueueDefinition(NamedTuple):
    machine: str
    name: str
    node_prefix: str
    first_range: RANGE
    second_range: Optional[RANGE]
    core_size: int
    name_format: int

    @classmethod
    def from_values(cls, machine: str, name: str, node_prefix: str, *values: int):
        """
        Mirrors the catalog layout, with one or two ranges:

        (machine, queue, prefix, start, end, core_size, name_format)
        (machine, queue, prefix, start, end, start2, end2, core_size, name_format)
        """
        if len(values) == 4:
            start, end, core_size, name_format = values
            second_range = None
        elif len(values) == 6:
            start, end, start2, end2, core_size, name_format = values
            second_range = (start2, end2)
        else:
            raise TypeError(f"expected 4 or 6 integer values, got {len(values)}")
        return cls(
            machine,
            name,
            node_prefix,
            (start, end),
            second_range,
            core_size,
            name_format,
        )

    @property
    def ranges(self) -> List[RANGE]:
        out = [self.first_range]
        if self.second_range is not None:
            out.append(self.second_range)
        return out

    @property
    def hash(self) -> str:
        second = self.second_range
        if second is None:
            second = (UNKNOWN_INDEX, UNKNOWN_INDEX)
        parts = (
            self.machine,
            self.name,
            self.node_prefix,
            *[str(v) for v in self.first_range],
            *[str(v) for v in second],
            str(self.core_size),
            str(self.name_format),
        )
        sha = hashlib.sha1()
        for part in parts:
            sha.update(part.encode("utf-8"))
        return sha.hexdigest()

    @property
    def capacity_nodes(self) -> int:
        return sum([end - start + 1 for start, end in self.ranges])

    @property
    def capacity_cores(self) -> int:
        return self.capacity_nodes * self.core_size

    def contains(self, index: int) -> bool:
        for start, end in self.ranges:
            if start <= index <= end:
                return True
        return False

    def label(self) -> str:
        return f"{self.machine} - {self.name}"


class QueueHealth(NamedTuple):
    core_size: int
    up_nodes: int = 0
    down_nodes: int = 0
    idle_nodes: int = 0
    running_nodes: int = 0
    idle_cores: int = 0
    running_cores: int = 0

    @property
    def total_nodes(self) -> int:
        return self.up_nodes + self.down_nodes

    @property
    def total_cores(self) -> int:
        return self.total_nodes * self.core_size

    @property
    def free_cores(self) -> int:
        return self.idle_cores
