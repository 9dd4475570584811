from typing import List

from qview import report
from qview.entities import QueueDefinition
from qview.report import QueueView
from qview.table import Alignment, Style, Table

SYSTEM_STATUS = "SYSTEM STATUS"
MULTI_QUEUE_NOTE = (
    "Jobs that fall between multiple queues are shown in each queue they use "
    "resources from."
)
NO_JOBS = "No jobs in this queue."

_JOB_ALIGNMENTS = {
    report.JID: Alignment.RIGHT,
    report.STATUS: Alignment.CENTER,
    report.CORES: Alignment.RIGHT,
}
_HEALTH_ALIGNMENTS = {report.VALUE: Alignment.RIGHT}


def render(queue_view: QueueView, style: Style) -> str:
    """
    Title, job table, system status table, then the multi-queue note.
    """
    queue = queue_view.queue
    sections = [queue.label()]

    jobs = queue_view.jobs_to_df()
    if jobs.empty:
        sections.append(NO_JOBS)
    else:
        sections.append(style.render(Table.from_df(jobs), _JOB_ALIGNMENTS).rstrip())

    health = Table.from_df(queue_view.health_to_df())
    sections.append(SYSTEM_STATUS)
    sections.append(style.render(health, _HEALTH_ALIGNMENTS).rstrip())
    sections.append(MULTI_QUEUE_NOTE)

    out = "\n\n".join(sections)
    out += "\n"
    return out


def render_menu(queues: List[QueueDefinition]) -> str:
    """
    Numbered from 1, as the selection prompt expects.
    """
    lines = [
        f"{i + 1:>3d}. {queue.label()} "
        f"({queue.capacity_nodes} nodes, {queue.capacity_cores} cores)"
        for i, queue in enumerate(queues)
    ]
    out = "\n".join(lines)
    out += "\n"
    return out
