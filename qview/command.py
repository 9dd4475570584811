import logging
import subprocess
from typing import List, Optional, Union

from typing_extensions import Literal

_LOGGER = logging.getLogger(__name__)

RAISE = "raise"
IGNORE = "ignore"

ERROR_HANDLING = Union[Literal["raise"], Literal["ignore"]]

NOT_FOUND_RETURNCODE = 127
TIMEOUT_RETURNCODE = 124


class CommandError(RuntimeError):
    pass


class Result:
    def __init__(self, stdout: str, stderr: str, returncode: int) -> None:
        self._stdout: str = stdout
        self._stderr: str = stderr
        self._returncode: int = returncode

    @property
    def stdout(self) -> str:
        return self._stdout

    @property
    def stderr(self) -> str:
        return self._stderr

    @property
    def returncode(self) -> int:
        return self._returncode

    @property
    def ok(self) -> bool:
        return self._returncode == 0


def run(
    args: List[str],
    error_handling: ERROR_HANDLING = RAISE,
    timeout: Optional[float] = None,
) -> Result:
    """
    Runs `args` and captures decoded output. With "raise", any failure raises
    CommandError. With "ignore", failures are logged and a Result is returned
    anyway; a missing executable or a timeout yields empty stdout.
    """
    assert error_handling in (RAISE, IGNORE)
    _LOGGER.debug(f"running: {' '.join(args)}")

    try:
        completed = subprocess.run(
            args, stdout=subprocess.PIPE, stderr=subprocess.PIPE, timeout=timeout
        )
    except FileNotFoundError as e:
        result = Result("", str(e), NOT_FOUND_RETURNCODE)
    except subprocess.TimeoutExpired:
        result = Result("", f"timed out after {timeout}s", TIMEOUT_RETURNCODE)
    else:
        result = Result(
            completed.stdout.decode("utf-8", "ignore"),
            completed.stderr.decode("utf-8", "ignore"),
            completed.returncode,
        )

    if result.ok:
        return result

    message = f"`{' '.join(args)}` failed ({result.returncode}): {result.stderr.strip()}"
    if error_handling == RAISE:
        raise CommandError(message)

    _LOGGER.warning(message)
    return result
