from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema (three positionals plus a handful of
flags) and translates the parsed namespace into a raw configuration
dictionary for the validator.
"""

import argparse
from typing import Any, Dict

from etcdextract.domain.constants import APP_NAME, APP_VERSION, DEFAULT_ETCD_ENDPOINT

_DESCRIPTION = (
    "Periodically extract one or more etcd subtrees, rebuild them as a single "
    "nested JSON document and publish it, timestamped, to stdout or an HTTP endpoint."
)

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the etcdextract CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog=APP_NAME,
        description=_DESCRIPTION,
    )

    # --- Positionals ---
    p.add_argument(
        "roots",
        metavar="DOC_ROOTS",
        help="comma-separated list of etcd roots to extract",
    )
    p.add_argument(
        "interval",
        metavar="INTERVAL",
        help="interval in seconds to perform the extraction",
    )
    p.add_argument(
        "destination",
        metavar="URL",
        help="URL to post the JSON data to, or stdout:// to print it",
    )

    # --- Store ---
    p.add_argument(
        "-e", "--endpoint",
        default=DEFAULT_ETCD_ENDPOINT,
        help=f"etcd endpoint (default: {DEFAULT_ETCD_ENDPOINT})",
    )
    p.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="per-request deadline in seconds for each root (default: 5)",
    )

    # --- Diagnostics ---
    p.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="verbose output",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="also write logs to this rotating file",
    )

    # --- Execution ---
    p.add_argument(
        "--once",
        action="store_true",
        help="run a single extraction cycle and exit",
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {APP_VERSION}",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_config(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into a raw configuration dictionary.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Unvalidated configuration.
    """
    return {
        "roots": args.roots,
        "interval": args.interval,
        "destination": args.destination,
        "endpoint": args.endpoint,
        "timeout": args.timeout,
        "log_level": "DEBUG" if args.verbose else "INFO",
        "log_file": args.log_file,
        "once": bool(args.once),
    }
