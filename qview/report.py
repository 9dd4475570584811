import logging
from typing import Dict, List, Optional

import pandas as pd

from qview import health, matching, parse
from qview.entities import Job, QueueDefinition, QueueHealth
from qview.sge import SnapshotProvider

_LOGGER = logging.getLogger(__name__)

JID = "JID"
JOB_NAME = "Job Name"
USER = "User"
STATUS = "Status"
CORES = "Cores"
JOB_COLUMNS = [JID, JOB_NAME, USER, STATUS, CORES]

METRIC = "Metric"
VALUE = "Value"
JOBS = "Jobs"
TOTAL_CORES = "Total Cores"
AVAILABLE_CORES = "Available Cores"
RUNNING_CORES = "Running Cores"
TOTAL_NODES = "Total Nodes"
UP_NODES = "Up Nodes"
DOWN_NODES = "Down Nodes"
IDLE_NODES = "Idle Nodes"


class QueueView:
    def __init__(
        self,
        queue: QueueDefinition,
        jobs: List[Job],
        health: QueueHealth,
        total_jobs: int,
    ):
        self._queue: QueueDefinition = queue
        self._jobs: List[Job] = jobs
        self._health: QueueHealth = health
        self._total_jobs: int = total_jobs

    @property
    def queue(self) -> QueueDefinition:
        return self._queue

    @property
    def jobs(self) -> List[Job]:
        return self._jobs.copy()

    @property
    def health(self) -> QueueHealth:
        return self._health

    @property
    def total_jobs(self) -> int:
        """
        Listing records parsed this run, whether or not they fell in a queue.
        """
        return self._total_jobs

    @property
    def job_count(self) -> int:
        """
        Rows of the job table, pending jobs included.
        """
        return len(self._jobs)

    def jobs_to_df(self) -> pd.DataFrame:
        rows = [
            {
                JID: job.number,
                JOB_NAME: job.name,
                USER: job.user,
                STATUS: job.status_token,
                CORES: job.slots,
            }
            for job in self._jobs
        ]
        out = pd.DataFrame(rows, columns=JOB_COLUMNS)
        return out

    def health_to_df(self) -> pd.DataFrame:
        h = self._health
        rows = [
            (JOBS, self.job_count),
            (TOTAL_CORES, h.total_cores),
            (AVAILABLE_CORES, h.free_cores),
            (RUNNING_CORES, h.running_cores),
            (TOTAL_NODES, h.total_nodes),
            (UP_NODES, h.up_nodes),
            (DOWN_NODES, h.down_nodes),
            (IDLE_NODES, h.idle_nodes),
        ]
        out = pd.DataFrame(rows, columns=[METRIC, VALUE])
        return out


class StatusReport:
    """
    Resolves the jobs of one snapshot against a queue catalog and aggregates
    the health of a selected queue.
    """

    def __init__(self, catalog: List[QueueDefinition], provider: SnapshotProvider):
        self._queues: List[QueueDefinition] = list(catalog)
        self._by_hash: Dict[str, QueueDefinition] = {q.hash: q for q in self._queues}
        self._provider: SnapshotProvider = provider

    @property
    def queues(self) -> List[QueueDefinition]:
        return self._queues.copy()

    def queue(self, index: int) -> QueueDefinition:
        return self._queues[index]

    def find(self, queue_hash: str) -> Optional[QueueDefinition]:
        return self._by_hash.get(queue_hash)

    def run(self, queue_hash: str) -> Optional[QueueView]:
        """
        Returns None when `queue_hash` names no configured queue.
        """
        queue = self.find(queue_hash)
        if queue is None:
            _LOGGER.debug(f"no configured queue has hash {queue_hash}")
            return None

        nodes = parse.parse_node_status(self._provider.get_node_status())
        queue_health = health.aggregate(queue, nodes)

        jobs = parse.parse_job_listing(self._provider.get_job_listing())
        of_interest = [job for job in jobs if self._resolve(job)]

        out = QueueView(
            queue=queue,
            jobs=[job for job in of_interest if job.belongs_to(queue_hash)],
            health=queue_health,
            total_jobs=len(jobs),
        )
        return out

    def _resolve(self, job: Job) -> bool:
        """
        Merges detail into `job` and records every queue it uses. Running jobs
        whose primary node lies outside every queue are skipped without a
        detail lookup.
        """
        if job.status.is_running:
            candidates = [q for q in self._queues if matching.is_on_nodes(job, q)]
            if not candidates:
                return False

        detail = parse.parse_job_detail(self._provider.get_job_detail(job.number))
        job.merge_detail(detail)

        for queue in self._queues:
            if matching.is_in_queue(job, queue):
                job.add_queue_hash(queue.hash)

        _LOGGER.debug(f"{job!r} uses {len(job.queue_hashes)} queue(s)")
        return job.is_of_interest
