import argparse
import logging
import multiprocessing as mp
import sys
from typing import List, Optional

from qview import sge, view
from qview.config import ConfigError, load_config
from qview.entities import QueueDefinition
from qview.logging_utils import setup_logging
from qview.report import StatusReport
from qview.table import STYLES

_LOGGER = logging.getLogger("viewqueue")

EXIT_USAGE = 2


def interface(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Shows the jobs and node health of one Grid Engine queue. Without --queue, offers a numbered list of configured queues to choose from."
    )
    parser.add_argument(
        "-q",
        "--queue",
        type=int,
        default=None,
        help="Number of the queue to show, as printed by --list.",
    )
    parser.add_argument(
        "-l",
        "--list",
        action="store_true",
        help="Prints the configured queues and exits.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=sorted(STYLES.keys()),
        default="ascii",
        help="Table format of the report.",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=str,
        default=None,
        help="YAML file with the queue catalog. Defaults to $QVIEW_CONFIG, then the built-in catalog.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Logs at DEBUG level.",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also writes log records to this file.",
    )
    parser.add_argument(
        "--test",
        action="store_true",
        help="Replays qstat output recorded with --generate-test-case. If no recording exists, records one while running.",
    )
    parser.add_argument(
        "--generate-test-case",
        action="store_true",
        help="Records qstat output to the --test-folder while running.",
    )
    parser.add_argument(
        "--test-folder",
        type=str,
        default=None,
        help="Folder for recorded qstat output. Defaults to ./test/snapshot.",
    )
    args = parser.parse_args(argv)

    setup_logging(log_file=args.log_file, verbose=args.verbose)

    try:
        config = load_config(args.config)
        catalog = config.build_catalog()
    except ConfigError as e:
        _LOGGER.error(str(e))
        return EXIT_USAGE

    if args.list:
        print(view.render_menu(catalog), end="")
        return 0

    selection = args.queue
    if selection is None:
        selection = _prompt(catalog)
    if selection is None or not 1 <= selection <= len(catalog):
        _LOGGER.error(f"queue selection must be between 1 and {len(catalog)}")
        return EXIT_USAGE

    provider = sge.provider_interface(
        generate_test=args.generate_test_case,
        run_test=args.test,
        test_folder=args.test_folder,
        executable=config.qstat,
        timeout=config.timeout,
    )
    status = StatusReport(catalog, provider)
    queue_view = status.run(status.queue(selection - 1).hash)
    assert queue_view is not None

    print(view.render(queue_view, STYLES[args.format]), end="")
    return 0


def _prompt(catalog: List[QueueDefinition]) -> Optional[int]:
    print(view.render_menu(catalog), end="")
    print("Select a queue: ", end="", flush=True)
    line = sys.stdin.readline()
    try:
        return int(line.strip())
    except ValueError:
        return None


def main() -> None:
    sys.exit(interface())


if __name__ == "__main__":
    mp.freeze_support()
    main()
