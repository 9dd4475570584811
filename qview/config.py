"""
Queue catalog and run settings.

A YAML file replaces the built-in catalog:

    qstat: qstat
    timeout: 30
    queues:
      - machine: Aegaeon
        queue: "@@westerink_d12chas_984"
        node_prefix: d12chas
        ranges: [[20, 40], [83, 102]]
        core_size: 24
        name_format: 3
"""

import logging
import os
from pathlib import Path, PurePath
from typing import Any, List, Optional, Tuple, Union

import yaml

from qview.entities import QueueDefinition

_LOGGER = logging.getLogger(__name__)

PathLike = Union[Path, PurePath, str]

CONFIG_ENV = "QVIEW_CONFIG"
DEFAULT_QSTAT = "qstat"

QUEUE_KEYS = ["machine", "queue", "node_prefix", "ranges", "core_size", "name_format"]

DEFAULT_CATALOG: List[Tuple[Any, ...]] = [
    ("Aegaeon", "@@westerink_d12chas_1992", "d12chas", 20, 102, 24, 3),
    ("Aegaeon", "@@westerink_d12chas_1488", "d12chas", 41, 102, 24, 3),
    ("Aegaeon", "@@westerink_d12chas_1008", "d12chas", 41, 82, 24, 3),
    ("Aegaeon", "@@westerink_d12chas_984", "d12chas", 20, 40, 83, 102, 24, 3),
    ("Aegaeon", "@@westerink_d12chas_504", "d12chas", 20, 40, 24, 3),
    ("Athos", "@@westerink_d6cneh", "d6cneh", 1, 83, 12, 3),
    ("Proteus", "@@westerink_graphics", "proteus", 1, 2, 12, 1),
]


class ConfigError(Exception):
    pass


class Config:
    def __init__(
        self,
        queues: Optional[List[Tuple[Any, ...]]] = None,
        qstat: str = DEFAULT_QSTAT,
        timeout: Optional[float] = None,
        source: Optional[Path] = None,
    ):
        if queues is None:
            queues = list(DEFAULT_CATALOG)
        self._queues: List[Tuple[Any, ...]] = queues
        self._qstat: str = qstat
        self._timeout: Optional[float] = timeout
        self._source: Optional[Path] = source

    @property
    def qstat(self) -> str:
        return self._qstat

    @property
    def timeout(self) -> Optional[float]:
        return self._timeout

    @property
    def source(self) -> Optional[Path]:
        return self._source

    def build_catalog(self) -> List[QueueDefinition]:
        out = []
        for values in self._queues:
            try:
                out.append(QueueDefinition.from_values(*values))
            except TypeError as e:
                raise ConfigError(f"bad queue entry {values!r}: {e}") from e
        return out


def load_config(path: Optional[PathLike] = None) -> Config:
    """
    `path`, else the file named by $QVIEW_CONFIG, else the built-in catalog.
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV)
    if not path:
        _LOGGER.debug("using built-in queue catalog")
        return Config()

    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"config file not found: {path}")

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"could not parse {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must hold a mapping")

    out = Config(
        queues=_read_queues(data.get("queues")),
        qstat=str(data.get("qstat", DEFAULT_QSTAT)),
        timeout=_read_timeout(data.get("timeout")),
        source=path,
    )
    _LOGGER.debug(f"loaded config from {path}")
    return out


def _read_timeout(value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"timeout must be a positive number of seconds, got {value!r}")
    return float(value)


def _read_queues(entries: Any) -> Optional[List[Tuple[Any, ...]]]:
    if entries is None:
        return None
    if not isinstance(entries, list):
        raise ConfigError("queues must be a list")
    return [_read_queue(entry) for entry in entries]


def _read_queue(entry: Any) -> Tuple[Any, ...]:
    """
    Mapping -> construction tuple in `DEFAULT_CATALOG` layout.
    """
    if not isinstance(entry, dict):
        raise ConfigError(f"queue entry must be a mapping, got {entry!r}")
    missing = [k for k in QUEUE_KEYS if k not in entry]
    if missing:
        raise ConfigError(f"queue entry {entry!r} is missing {', '.join(missing)}")

    ranges = entry["ranges"]
    if not isinstance(ranges, list) or len(ranges) not in (1, 2):
        raise ConfigError(f"ranges must hold one or two [start, end] pairs: {ranges!r}")

    bounds: List[int] = []
    for r in ranges:
        if not isinstance(r, list) or len(r) != 2:
            raise ConfigError(f"range must be a [start, end] pair: {r!r}")
        start, end = _read_int(r[0]), _read_int(r[1])
        if start > end:
            raise ConfigError(f"range start exceeds end: {r!r}")
        bounds.extend([start, end])

    core_size = _read_int(entry["core_size"])
    name_format = _read_int(entry["name_format"])
    if core_size <= 0 or name_format <= 0:
        raise ConfigError(f"core_size and name_format must be positive: {entry!r}")

    out = (
        str(entry["machine"]),
        str(entry["queue"]),
        str(entry["node_prefix"]),
        *bounds,
        core_size,
        name_format,
    )
    return out


def _read_int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"expected an integer, got {value!r}")
    return value
