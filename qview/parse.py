import logging
from typing import Callable, Dict, List, Optional
from xml.etree import ElementTree as ET

import pandas as pd

from qview.entities import Job, JobDetail
from qview.interpret import (
    classify,
    granted_host_index,
    pe_task_index,
    timepoint_datetime,
)
from qview.interpret import _common, _safe_convert

_LOGGER = logging.getLogger(__name__)

LISTING_HEADER_LINES = 2

NAME = "name"
LOAD = "load"
FIELD_COUNT = "field_count"
NODE_STATUS_COLUMNS = [NAME, LOAD, FIELD_COUNT]

QR_NAME = "QR_name"
RN_MAX = "RN_max"
JB_JOB_NAME = "JB_job_name"
PET_ID = "PET_id"
JG_QHOSTNAME = "JG_qhostname"

PLACEMENT_TAGS: Dict[str, Callable[[str], Optional[int]]] = {
    PET_ID: pe_task_index,
    JG_QHOSTNAME: granted_host_index,
}


def parse_job_listing(_s: str) -> List[Job]:
    """
    Output of plain `qstat`. The first two lines are a header and a rule. Blank
    lines carry no job and are skipped.
    """
    lines = _s.split("\n")[LISTING_HEADER_LINES:]
    out = [parse_job_line(line) for line in lines if line.strip() != ""]
    return out


def parse_job_line(_s: str) -> Job:
    """
    Fields are `id priority name user state date time host-spec [slots]`.
    Missing fields read as empty strings so a truncated line still yields a job.

    "4242 5.0 sim alice r 01/02/2020 03:04:05 long@d12chas042.crc.nd.edu 4"
    """
    fields = _s.split()
    value = lambda i: _safe_convert.value_at(fields, i)

    out = Job(
        number=_safe_convert.type_cast_int_unsafe_to_safe(0, value(0)),
        priority=_safe_convert.type_cast_float_unsafe_to_safe(0.0, value(1)),
        name=value(2),
        user=value(3),
        status=classify(value(4)),
        time=timepoint_datetime(value(5), value(6)),
        host=value(7),
    )
    return out


def parse_job_detail(_s: str) -> JobDetail:
    """
    Output of `qstat -xml -j <id>`. Elements are read in document order:

    - QR_name: queue, without the leading "*" used for wildcard queue requests
    - RN_max: slot count. Parallel environment ranges each report a maximum and
      only the first one is the allocation, so later values are ignored.
    - JB_job_name: untruncated job name
    - PET_id, JG_qhostname: placement, one node index each

    Malformed documents keep whatever was read before the error.
    """
    queue_name = ""
    job_name = ""
    slots: Optional[int] = None
    node_indices: List[int] = []

    for tag, text in _iterate_leaf_elements(_s):
        if tag == QR_NAME:
            queue_name = _strip_marker(text)
        elif tag == RN_MAX and slots is None:
            slots = _safe_convert.type_cast_int_unsafe_to_safe(0, text)
        elif tag == JB_JOB_NAME:
            job_name = text
        elif tag in PLACEMENT_TAGS:
            index = PLACEMENT_TAGS[tag](text)
            if index is not None and index not in node_indices:
                node_indices.append(index)

    if slots is None:
        slots = 0

    return JobDetail(queue_name, slots, job_name, node_indices)


def parse_node_status(_s: str) -> pd.DataFrame:
    """
    Output of `qstat -f`. One row per non-blank line:

    `long@d12chas042.crc.nd.edu BIP 0/24/24 24.02 lx-amd64`

    The third field is the `reserved/used/total` slot triplet. A sixth field
    holds state flags, which marks the queue instance as unavailable.
    """
    rows = []
    for line in _s.split("\n"):
        fields = line.split()
        if not fields:
            continue
        rows.append(
            {
                NAME: fields[0],
                LOAD: _safe_convert.value_at(fields, 2),
                FIELD_COUNT: len(fields),
            }
        )
    out = pd.DataFrame(rows, columns=NODE_STATUS_COLUMNS)
    return out


def _iterate_leaf_elements(_s: str):
    """
    Yields (tag, text) when each element closes. Only leaves are of interest, so
    closing order matches document order.
    """
    parser = ET.XMLPullParser(events=("end",))
    try:
        parser.feed(_s)
        parser.close()
    except ET.ParseError as e:
        _LOGGER.debug(f"detail document is malformed, keeping partial read: {e}")

    try:
        for _, element in parser.read_events():
            yield _local_name(element.tag), (element.text or "").strip()
    except ET.ParseError as e:
        _LOGGER.debug(f"stopped reading detail document: {e}")


def _local_name(_tag: str) -> str:
    """
    "{urn:x}QR_name" -> "QR_name"
    """
    return _tag.rsplit("}", 1)[-1]


def _strip_marker(_v: str) -> str:
    """
    "*@@westerink_d12chas_1488" -> "@@westerink_d12chas_1488"
    """
    if _v.startswith(_common.DEFAULT_QUEUE_MARKER):
        return _v[len(_common.DEFAULT_QUEUE_MARKER) :]
    return _v
