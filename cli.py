# cli.py
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from rich.console import Console
from rich.logging import RichHandler

from app_meta import APP_NAME, detect_version
from backend import PulseSinkBackend
from cycle import eligible_devices, select_next
from errors import SwitcherError
from models import Device
from patterns import DeviceFilter
from store_config import ConfigStore

logger = logging.getLogger(__name__)

SILENT = logging.CRITICAL + 10


def _log_level(verbose: int, quiet: int) -> int:
    if verbose:
        return logging.DEBUG
    if quiet == 1:
        return logging.WARNING
    if quiet == 2:
        return logging.ERROR
    if quiet >= 3:
        return SILENT
    name = os.environ.get("PULSE_SWITCHER_LOGLEVEL", "INFO").strip().upper()
    if name.isdigit():
        return int(name)
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def setup_logging(level: int) -> None:
    handler = RichHandler(console=Console(stderr=True), show_time=False, show_path=False)
    logging.basicConfig(level=level, format="%(message)s", handlers=[handler], force=True)


def _common_options(default_count, default_config) -> argparse.ArgumentParser:
    """
    Options accepted both before and after the subcommand. The subcommand
    copies default to SUPPRESS so they don't overwrite values given earlier.
    """
    common = argparse.ArgumentParser(add_help=False)
    noise = common.add_mutually_exclusive_group()
    noise.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=default_count,
        help="verbose output, pass to add debug messages",
    )
    noise.add_argument(
        "-q",
        "--quiet",
        action="count",
        default=default_count,
        help="once for warnings/errors only, twice for errors only, thrice for silence",
    )
    common.add_argument(
        "-c",
        "--config",
        dest="config_file",
        type=Path,
        default=default_config,
        metavar="FILE",
        help="config file path (default: $XDG_CONFIG_HOME/pulse-switcher/config.ini if it exists)",
    )
    return common


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Switch the default PulseAudio sink to the next matching device.",
        parents=[_common_options(0, None)],
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {detect_version()}")

    sub_common = _common_options(argparse.SUPPRESS, argparse.SUPPRESS)
    sub = parser.add_subparsers(dest="cmd", metavar="{list,next,init-config}")
    sub.add_parser(
        "list",
        parents=[sub_common],
        help="list all devices, the matching devices and the current default (default command)",
    )
    sub.add_parser(
        "next",
        parents=[sub_common],
        help="set the next matching device as the new default; the first match is used "
        "when the current default does not match",
    )
    sub.add_parser("init-config", parents=[sub_common], help="write an example config file if none exists")
    return parser


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = _parser()
    args = parser.parse_args(argv)
    if args.verbose and args.quiet:
        parser.error("argument -q/--quiet: not allowed with argument -v/--verbose")
    return args


def _print_devices(title: str, devices: Sequence[Device]) -> None:
    print(title)
    for d in devices:
        print(d)


def _default_device(devices: Sequence[Device], device_id: Optional[int]) -> Optional[Device]:
    for d in devices:
        if d.id == device_id:
            return d
    return None


def _cmd_list(devices: List[Device], default_id: Optional[int], flt: DeviceFilter) -> int:
    _print_devices("All devices:", devices)
    print()
    _print_devices("Matching devices:", eligible_devices(devices, flt))
    print()
    default = _default_device(devices, default_id)
    print(f"Default device: {default if default is not None else '(none)'}")
    return 0


def _cmd_next(backend: PulseSinkBackend, devices: List[Device], default_id: Optional[int], flt: DeviceFilter) -> int:
    sel = select_next(devices, default_id, flt)
    if not sel.ok:
        logger.error("%s", sel.error)
        return 1

    new = sel.unwrap()
    logger.info("Setting device '%s' as the default sink", new)
    backend.set_default(new.id)
    return 0


def _cmd_init_config(store: ConfigStore) -> int:
    if store.ensure_exists():
        logger.info("wrote example config")
    else:
        logger.info("config file already exists")
    print(store.file_path)
    return 0


def run(
    argv: Optional[Sequence[str]] = None,
    backend_factory: Callable[[], PulseSinkBackend] = PulseSinkBackend,
) -> int:
    args = _parse_args(argv)
    setup_logging(_log_level(args.verbose, args.quiet))
    logger.debug(f"parsed {args=}")

    store = ConfigStore(override=args.config_file)
    cmd = args.cmd or "list"

    try:
        if cmd == "init-config":
            return _cmd_init_config(store)

        # compile before talking to the server so bad patterns fail fast
        flt = DeviceFilter.from_pattern_set(store.load())
        logger.debug("filter: %r", flt)

        with backend_factory() as backend:
            devices = backend.list_devices()
            default_id = backend.default_device_id()
            if cmd == "next":
                return _cmd_next(backend, devices, default_id, flt)
            return _cmd_list(devices, default_id, flt)
    except SwitcherError as e:
        logger.error("%s", e)
        return 1


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
