"""
Membership rules, one per job state.

A running job has a placement, so it belongs to every queue whose node ranges
contain at least one of its nodes. Jobs spread across several queues belong to
each of them. A job in any other known state has no placement yet and belongs
to the queue named in its detail document. A job in an unknown state belongs
to no queue.

Node ranges must not be consulted for non-running jobs and queue names must not
be consulted for running jobs.
"""

from typing import Callable, Dict

from qview.entities import Job, QueueDefinition
from qview.interpret import JobStatus

MEMBERSHIP_FN = Callable[[Job, QueueDefinition], bool]


def is_in_queue(job: Job, queue: QueueDefinition) -> bool:
    return _MEMBERSHIP_RULES[job.status](job, queue)


def is_on_nodes(job: Job, queue: QueueDefinition) -> bool:
    """
    Cheap check on the primary node shown in the job listing. Used to decide
    whether fetching a running job's detail document is worthwhile.
    """
    if job.core_name != queue.node_prefix:
        return False
    return queue.contains(job.core_number)


def _by_placement(job: Job, queue: QueueDefinition) -> bool:
    if job.core_name != queue.node_prefix:
        return False
    for index in job.node_indices:
        if queue.contains(index):
            return True
    return False


def _by_queue_name(job: Job, queue: QueueDefinition) -> bool:
    return job.queue_name == queue.name


def _never(job: Job, queue: QueueDefinition) -> bool:
    return False


_MEMBERSHIP_RULES: Dict[JobStatus, MEMBERSHIP_FN] = {
    JobStatus.RUNNING: _by_placement,
    JobStatus.PENDING: _by_queue_name,
    JobStatus.HELD: _by_queue_name,
    JobStatus.SUSPENDED: _by_queue_name,
    JobStatus.ERROR: _by_queue_name,
    JobStatus.DELETED: _by_queue_name,
    JobStatus.UNKNOWN: _never,
}
assert set(_MEMBERSHIP_RULES.keys()) == set(JobStatus)
