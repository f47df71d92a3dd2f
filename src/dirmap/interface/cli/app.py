from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, merging of configuration
sources (defaults, persisted file, CLI overrides), execution of a mapping
run or a snapshot inspection, and result rendering.
"""

import json
import os
import sys
from dataclasses import asdict, replace
from typing import Any, Dict, List, Optional

from dirmap.core.engine import run_mapping, summarize_snapshot, unmap_tree
from dirmap.core.validator import validate_config
from dirmap.domain.config import get_default_config, load_config, save_config
from dirmap.domain.errors import DirmapError
from dirmap.domain.results import MappingResult
from dirmap.infra.logging import LoggingConfig, configure_logging, get_default_log_path, get_logger
from dirmap.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 success, 1 failure, 2 usage error).
    """
    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Logging bootstrap (console on stderr, optional rotating file)
    log_file: Optional[str] = None
    if args.log_file is not None:
        log_file = args.log_file or get_default_log_path()
    log_cfg = LoggingConfig(
        level="DEBUG" if args.debug else "INFO",
        console=True,
        log_file=log_file,
    )
    configure_logging(log_cfg)

    logger.debug("CLI execution initiated. Resolving configuration hierarchy...")

    # 3. Resolve and validate configuration
    base_conf = get_default_config() if args.use_defaults else load_config()
    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))
    clean_conf, warnings = validate_config(raw_conf, strict=False)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    # A persisted log level only takes effect once the config is resolved
    if clean_conf["log_level"] != log_cfg.level:
        configure_logging(replace(log_cfg, level=clean_conf["log_level"]), force=True)

    if args.save_config:
        save_config(clean_conf)
        logger.info("Configuration saved.")

    if args.dump_config:
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return EXIT_OK

    # 4. Inspection mode
    if args.inspect_path:
        return _inspect(args.inspect_path, json_output=args.json_output)

    # 5. Pre-flight input verification
    start_path = clean_conf["start_path"]
    if not start_path:
        _report_error("A start path is required.")
        parser.print_usage(sys.stderr)
        return EXIT_USAGE
    if not os.path.isdir(start_path):
        _report_error(f"Start path does not exist or is not a directory: {start_path}")
        return EXIT_USAGE

    # 6. Mapping execution phase
    try:
        result = run_mapping(clean_conf)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        print("Interrupted.", file=sys.stderr)
        return EXIT_INTERRUPTED
    except Exception as e:
        logger.critical(f"Unexpected failure: {e}", exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILURE

    # 7. Output rendering phase
    if args.json_output:
        print(json.dumps(asdict(result), ensure_ascii=False, indent=2))
    else:
        _print_human_summary(result)

    return EXIT_OK if result.ok else EXIT_FAILURE

# -----------------------------------------------------------------------------
# INSPECTION
# -----------------------------------------------------------------------------

def _inspect(snapshot_path: str, json_output: bool) -> int:
    """Decode a snapshot file and render its statistics."""
    try:
        with open(snapshot_path, "rb") as f:
            data = f.read()
    except OSError as e:
        _report_error(f"Cannot read snapshot '{snapshot_path}': {e}")
        return EXIT_USAGE

    try:
        snapshot = unmap_tree(data)
    except DirmapError as e:
        _report_error(f"Invalid snapshot '{snapshot_path}': {e}")
        return EXIT_FAILURE

    stats = summarize_snapshot(snapshot)
    if json_output:
        print(json.dumps(stats, ensure_ascii=False, indent=2))
        return EXIT_OK

    print(f"Snapshot: {snapshot_path}")
    print(f"Roots: {', '.join(stats['roots']) or '(none)'}")
    print(f"Directories: {stats['directories']:,}")
    print(f"Files: {stats['files']:,}")
    print(f"Total size: {_format_size(stats['total_size'])}")
    for type_name, count in stats["by_type"].items():
        print(f"  - {type_name}: {count:,}")
    return EXIT_OK

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow-merge the non-None overrides of known keys into the base config.

    Args:
        base: The primary configuration dictionary.
        overrides: New values to inject.

    Returns:
        Dict[str, Any]: The merged configuration state.
    """
    out = dict(base)
    for k in ("start_path", "output_path", "compression_level", "max_workers", "log_level"):
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _report_error(msg: str) -> None:
    logger.error(msg)
    print(f"ERROR: {msg}", file=sys.stderr)


def _print_human_summary(result: MappingResult) -> None:
    """Print a MappingResult as a short terminal report."""
    if not result.ok:
        print(f"ERROR: {result.error}", file=sys.stderr)
        return

    print(f"Snapshot written: {result.output_path} ({result.byte_count:,} bytes)")
    print(f"Directories: {result.directory_count:,}")
    print(f"Files: {result.file_count:,}")
    print(f"Total size: {_format_size(result.total_size)}")
    if result.skipped:
        print(f"Skipped (unreadable): {len(result.skipped)}")


def _format_size(size: int) -> str:
    if size < 1024:
        return f"{size:,} B"
    value = float(size)
    unit = "B"
    for unit in ("KiB", "MiB", "GiB", "TiB"):
        value /= 1024
        if value < 1024:
            break
    return f"{value:.1f} {unit} ({size:,} B)"

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
