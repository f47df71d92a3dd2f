from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and translates parsed namespaces into
configuration overrides understood by the engine.
"""

import argparse
from typing import Any, Dict

from dirmap.domain.config import DEFAULT_COMPRESSION_LEVEL, DEFAULT_OUTPUT_PATH

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the dirmap CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="dirmap",
        description="Build a compressed size snapshot of a directory tree.",
    )

    # --- Path Management ---
    p.add_argument(
        "start_path",
        nargs="?",
        default=None,
        help="Root directory to scan.",
    )
    p.add_argument(
        "-o", "--output",
        dest="output_path",
        default=None,
        help=f"Destination file for the snapshot (default: '{DEFAULT_OUTPUT_PATH}').",
    )

    # --- Codec and Walk Tuning ---
    p.add_argument(
        "--level",
        dest="compression_level",
        type=int,
        default=None,
        help=f"Zstandard compression level (default: {DEFAULT_COMPRESSION_LEVEL}).",
    )
    p.add_argument(
        "--workers",
        dest="max_workers",
        type=int,
        default=None,
        help="Number of walker threads (default: executor choice).",
    )

    # --- Snapshot Inspection ---
    p.add_argument(
        "--inspect",
        dest="inspect_path",
        metavar="SNAPSHOT",
        default=None,
        help="Decode an existing snapshot file and print its summary.",
    )

    # --- Configuration and Diagnostic Tools ---
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore the persisted configuration file.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration and exit.",
    )
    p.add_argument(
        "--save-config",
        action="store_true",
        help="Persist the effective configuration as the new defaults.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        nargs="?",
        const="",
        default=None,
        help="Also write a rotating log file (default location when no path is given).",
    )

    # --- Format Selection ---
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print machine-readable JSON instead of a summary.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into a configuration dictionary.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset (None when unset).
    """
    overrides: Dict[str, Any] = {}

    overrides["start_path"] = args.start_path
    overrides["output_path"] = args.output_path
    overrides["compression_level"] = args.compression_level
    overrides["max_workers"] = args.max_workers

    if args.debug:
        overrides["log_level"] = "DEBUG"

    return overrides
