import logging
from pathlib import Path, PurePath
from typing import Optional, Union

from typing_extensions import Protocol

import qview.command as command

_LOGGER = logging.getLogger(__name__)

PathLike = Union[Path, PurePath, str]

JOBS_FILE = "jobs.txt"
NODES_FILE = "nodes.txt"
DETAIL_FOLDER = "detail"
DETAIL_SUFFIX = ".xml"


class SnapshotProvider(Protocol):
    def get_job_listing(self) -> str:
        ...

    def get_job_detail(self, jobid: int) -> str:
        ...

    def get_node_status(self) -> str:
        ...


class Qstat:
    """
    Live Grid Engine data. Failures yield empty output, which downstream parsing
    reads as "no jobs" or "no nodes".

    http://gridscheduler.sourceforge.net/htmlman/htmlman1/qstat.html
    """

    def __init__(self, executable: str = "qstat", timeout: Optional[float] = None):
        self._executable: str = executable
        self._timeout: Optional[float] = timeout

    def get_job_listing(self) -> str:
        return self._pull([self._executable])

    def get_job_detail(self, jobid: int) -> str:
        return self._pull([self._executable, "-xml", "-j", f"{jobid}"])

    def get_node_status(self) -> str:
        return self._pull([self._executable, "-f"])

    def _pull(self, args) -> str:
        result = command.run(args, error_handling=command.IGNORE, timeout=self._timeout)
        return result.stdout


class QstatArchive:
    """
    Replays a snapshot stored by `QstatRecorder`. Missing files read as empty.
    """

    def __init__(self, folder: PathLike):
        self._folder: Path = Path(folder)

    def get_job_listing(self) -> str:
        return self._read(self._folder / JOBS_FILE)

    def get_job_detail(self, jobid: int) -> str:
        return self._read(detail_path(self._folder, jobid))

    def get_node_status(self) -> str:
        return self._read(self._folder / NODES_FILE)

    def has_snapshot(self) -> bool:
        paths = [self._folder / JOBS_FILE, self._folder / NODES_FILE]
        return all([p.is_file() for p in paths])

    @staticmethod
    def _read(path: Path) -> str:
        if not path.is_file():
            _LOGGER.warning(f"no recorded output at {path}")
            return ""
        with open(path, "r") as f:
            return f.read()


class QstatRecorder:
    """
    Passes calls through to another provider and writes every output to disk in
    the layout `QstatArchive` reads.
    """

    def __init__(self, source: SnapshotProvider, folder: PathLike):
        self._source: SnapshotProvider = source
        self._folder: Path = Path(folder)

    def get_job_listing(self) -> str:
        return self._write(self._folder / JOBS_FILE, self._source.get_job_listing())

    def get_job_detail(self, jobid: int) -> str:
        data = self._source.get_job_detail(jobid)
        return self._write(detail_path(self._folder, jobid), data)

    def get_node_status(self) -> str:
        return self._write(self._folder / NODES_FILE, self._source.get_node_status())

    @staticmethod
    def _write(path: Path, data: str) -> str:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            f.write(data)
        return data


def detail_path(folder: PathLike, jobid: int) -> Path:
    return Path(folder) / DETAIL_FOLDER / f"{jobid}{DETAIL_SUFFIX}"


def provider_interface(
    generate_test: bool,
    run_test: bool,
    test_folder: Optional[PathLike] = None,
    executable: str = "qstat",
    timeout: Optional[float] = None,
) -> SnapshotProvider:
    """
    Chooses the data source for one run. Recording passes live data through
    while writing it, so a replay of an absent recording records it first.
    """
    live = Qstat(executable=executable, timeout=timeout)
    if not (run_test or generate_test):
        return live

    if test_folder is None:
        test_folder = PurePath("test") / "snapshot"
    archive = QstatArchive(test_folder)
    if generate_test or not archive.has_snapshot():
        _LOGGER.info(f"recording qstat output to {test_folder}")
        return QstatRecorder(live, test_folder)
    return archive
