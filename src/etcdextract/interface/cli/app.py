from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the process lifecycle: argument parsing, a single logging
bootstrap, configuration validation, store client construction, signal
wiring and the scheduler loop. Maps every way out of the loop to a
process exit code.
"""

import logging
import os
import signal
import sys
import threading
from typing import Any, Callable, Dict, List, Optional

from etcdextract.core.scheduler import Scheduler, ShutdownRequested
from etcdextract.core.validator import validate_config
from etcdextract.domain.constants import APP_NAME
from etcdextract.infra.logging import LoggingConfig, configure_logging, get_logger
from etcdextract.infra.store import EtcdClient
from etcdextract.interface.cli import args as cli_args

_HANDLED_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGINT", "SIGTERM", "SIGHUP", "SIGQUIT")
    if hasattr(signal, name)
)

_SIGPIPE = getattr(signal, "SIGPIPE", 13)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the extraction loop.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 after --once, 1 on configuration or fatal
             errors, 128 + signal number on termination by signal
             and 141 when the console reader closes the pipe).
    """
    # 1. Argument parsing phase (usage errors exit with status 2)
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)
    raw_conf = cli_args.args_to_config(args)

    # 2. Logging bootstrap, once per process
    configure_logging(LoggingConfig(level=raw_conf["log_level"], log_file=raw_conf["log_file"]))
    log = get_logger(APP_NAME)

    # 3. Configuration validation (fatal on invalid values)
    try:
        conf, warnings = validate_config(raw_conf)
    except (TypeError, ValueError) as e:
        log.critical(str(e))
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    for w in warnings:
        log.warning(f"Configuration Constraint: {w}")

    # 4. Store client construction
    try:
        client = EtcdClient(conf["endpoint"], timeout=conf["timeout"])
    except ValueError as e:
        log.critical(f"Cannot create etcd client: {e}")
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    # 5. Scheduler loop
    stop_event = threading.Event()
    scheduler = Scheduler(client, conf, stop_event=stop_event, log=log)
    previous = _install_signal_handlers(stop_event, log)

    try:
        scheduler.run_forever(max_cycles=1 if conf["once"] else None)
    except ShutdownRequested as e:
        return e.exit_code
    except BrokenPipeError:
        # Console reader went away (e.g. piped into head); exit as SIGPIPE would
        log.error("Console output closed by the reader")
        _silence_stdout()
        return 128 + _SIGPIPE
    finally:
        _restore_signal_handlers(previous)
        client.close()

    return 0

# -----------------------------------------------------------------------------
# SIGNAL WIRING
# -----------------------------------------------------------------------------

def _make_signal_handler(stop_event: threading.Event, log: logging.Logger) -> Callable[[int, Any], None]:
    """
    Build a handler that cancels the scheduler and aborts the running cycle.

    The handler runs on the main thread, so raising ShutdownRequested
    interrupts whatever the loop is blocked on (fetch, publish or sleep).
    """
    def _handler(signum: int, frame: Any) -> None:
        name = signal.Signals(signum).name
        log.error(f"Signal received: {name}")
        stop_event.set()
        raise ShutdownRequested(signum, name)

    return _handler


def _install_signal_handlers(stop_event: threading.Event, log: logging.Logger) -> Dict[int, Any]:
    handler = _make_signal_handler(stop_event, log)
    previous: Dict[int, Any] = {}
    for signum in _HANDLED_SIGNALS:
        previous[signum] = signal.signal(signum, handler)
    return previous


def _restore_signal_handlers(previous: Dict[int, Any]) -> None:
    for signum, handler in previous.items():
        signal.signal(signum, handler)


def _silence_stdout() -> None:
    """Point stdout at devnull so the interpreter's final flush cannot fail again."""
    try:
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        os.close(devnull)
    except (AttributeError, OSError, ValueError):
        pass

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
