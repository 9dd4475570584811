from typing import List, Optional

import pandas as pd

from qview import parse
from qview.entities import QueueDefinition, QueueHealth
from qview.interpret import _common, _safe_convert, node_index
from qview.interpret.node import split_component

DOWN_FIELD_COUNT = 6
USED_SLOTS_POSITION = 1


def aggregate(queue: QueueDefinition, nodes: pd.DataFrame) -> QueueHealth:
    """
    Counts node and core health for one queue from a `qstat -f` frame (see
    `parse.parse_node_status`). Every call starts from zero.

    Rows are kept when the name contains the node prefix and the trailing
    `queue.name_format` digits parse to an index inside the queue ranges. Kept
    rows are down when they carry state flags. Up rows are running when any
    slot is used and idle when none is.
    """
    members = _members(queue, nodes)
    if members.empty:
        return QueueHealth(queue.core_size)

    down = members[parse.FIELD_COUNT] == DOWN_FIELD_COUNT
    up = members[~down]

    used = up[parse.LOAD].apply(used_slots).astype(int)
    running = used > 0
    idle = used == 0

    running_cores = int(used[running].sum())
    idle_cores = int((queue.core_size - used[running]).sum())
    idle_cores += int(idle.sum()) * queue.core_size

    out = QueueHealth(
        core_size=queue.core_size,
        up_nodes=int(len(up)),
        down_nodes=int(down.sum()),
        idle_nodes=int(idle.sum()),
        running_nodes=int(running.sum()),
        idle_cores=idle_cores,
        running_cores=running_cores,
    )
    return out


def used_slots(_v: str) -> int:
    """
    "0/3/24" -> 3
    "0/x/24" -> 0
    "" -> 0
    """
    used = split_component(_common.LOAD_SEPARATOR, USED_SLOTS_POSITION, _v)
    return _safe_convert.type_cast_int_unsafe_to_safe(0, used)


def _members(queue: QueueDefinition, nodes: pd.DataFrame) -> pd.DataFrame:
    if nodes.empty:
        return nodes

    named = nodes[nodes[parse.NAME].str.contains(queue.node_prefix, regex=False)]
    indices: List[Optional[int]] = [
        node_index(name, queue.name_format) for name in named[parse.NAME]
    ]
    in_range = [index is not None and queue.contains(index) for index in indices]
    mask = pd.Series(in_range, index=named.index, dtype=bool)
    return named[mask]
