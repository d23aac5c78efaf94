"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m merkle_cli build leaves.json [--out tree.json]
    python -m merkle_cli prove tree.json --leaf K [--out proof.json]
    python -m merkle_cli verify proof.json [--root 0x...] [--json]
    python -m merkle_cli multiproof tree.json --leaf K [K ...] [--out mp.json]
    python -m merkle_cli verify-multi mp.json [--root 0x...] [--json]
    python -m merkle_cli validate tree.json [--json]
    python -m merkle_cli render tree.json
    python -m merkle_cli bench [--sizes N ...] [--iterations N] [--json]
    python -m merkle_cli config --init

Any file argument may be "-" to read the document from stdin.
A .env file in the working directory is loaded before configuration.

Environment Variables:
    MERKLE_HASH_ALGORITHM       Hash algorithm: sha256 (default) or keccak256
    MERKLE_DEBUG                true enables DEBUG logging
    MERKLE_LOG_LEVEL            Log level (default: WARNING)
    MERKLE_LOG_FILE             Also log to this file
    MERKLE_OUTPUT_FORMAT        Default output format: json or human
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from dataclasses import asdict
from pathlib import Path
from typing import Sequence

from merkle_core.config import load_env_file, load_runtime_config, set_default_config
from merkle_core.crypto.hashing import HASH_FUNCTIONS
from merkle_core.schemas.errors import MerkleException
from merkle_cli import __version__
from merkle_cli.commands import bench, prove, tree, verify
from merkle_cli.commands.bench import DEFAULT_SIZES
from merkle_cli.config import load_config, get_default_config_template


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "WARNING", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.WARNING)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {number}")
    return number


def _add_leaf_selection(parser: argparse.ArgumentParser, multiple: bool) -> None:
    group = parser.add_mutually_exclusive_group(required=True)
    nargs = "+" if multiple else 1
    group.add_argument(
        "--leaf", "-l",
        type=int,
        nargs=nargs,
        default=None,
        help="Leaf number(s), 0-based in the order given to build",
    )
    group.add_argument(
        "--tree-index", "-i",
        type=int,
        nargs=nargs,
        default=None,
        help="Flat tree index(es) of the leaf node(s)",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="merkle",
        description="Merkle engine CLI - build trees, generate and verify inclusion proofs.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./merkle.json or ~/.config/merkle/config.json)",
    )
    parser.add_argument(
        "--runtime-config",
        type=Path,
        default=None,
        help="YAML engine configuration (hash_algorithm, debug); env vars override it",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--hash",
        type=str,
        default=None,
        choices=sorted(HASH_FUNCTIONS),
        help="Hash algorithm (overrides documents and config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- build command ---
    build_parser = subparsers.add_parser(
        "build",
        help="Build a tree from a leaves document",
        description='Build a flattened Merkle tree from {"leaves": ["0x..", ...]}.',
    )
    build_parser.add_argument("leaves", type=str, help="Leaves JSON file, or - for stdin")
    build_parser.add_argument("--out", "-o", type=str, default=None, help="Output file (default: stdout)")
    build_parser.set_defaults(func=tree.build_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Generate a single-leaf proof",
        description="Generate the sibling path proving one leaf of a tree.",
    )
    prove_parser.add_argument("tree", type=str, help="Tree JSON file, or - for stdin")
    _add_leaf_selection(prove_parser, multiple=False)
    prove_parser.add_argument("--out", "-o", type=str, default=None, help="Output file (default: stdout)")
    prove_parser.set_defaults(func=prove.prove_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a single-leaf proof",
        description="Recompute the root from a proof document and compare it with the trusted root.",
    )
    verify_parser.add_argument("proof", type=str, help="Proof JSON file, or - for stdin")
    verify_parser.add_argument("--root", type=str, default=None, help="Trusted root (default: root in document)")
    verify_parser.add_argument("--json", action="store_true", default=False, help="Output machine-readable JSON report")
    verify_parser.add_argument("--debug", action="store_true", default=False, help="Print tracebacks on error")
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- multiproof command ---
    multiproof_parser = subparsers.add_parser(
        "multiproof",
        help="Generate a multi-leaf proof",
        description="Generate one compact proof for several leaves of a tree.",
    )
    multiproof_parser.add_argument("tree", type=str, help="Tree JSON file, or - for stdin")
    _add_leaf_selection(multiproof_parser, multiple=True)
    multiproof_parser.add_argument("--out", "-o", type=str, default=None, help="Output file (default: stdout)")
    multiproof_parser.set_defaults(func=prove.multiproof_cmd)

    # --- verify-multi command ---
    verify_multi_parser = subparsers.add_parser(
        "verify-multi",
        help="Verify a multi-leaf proof",
        description="Replay a multi-proof document and compare the result with the trusted root.",
    )
    verify_multi_parser.add_argument("multiproof", type=str, help="Multi-proof JSON file, or - for stdin")
    verify_multi_parser.add_argument("--root", type=str, default=None, help="Trusted root (default: root in document)")
    verify_multi_parser.add_argument("--json", action="store_true", default=False, help="Output machine-readable JSON report")
    verify_multi_parser.add_argument("--debug", action="store_true", default=False, help="Print tracebacks on error")
    verify_multi_parser.set_defaults(func=verify.verify_multi_cmd)

    # --- validate command ---
    validate_parser = subparsers.add_parser(
        "validate",
        help="Check that a tree document is well-formed",
        description="Recompute every internal node and check node sizes and tree shape.",
    )
    validate_parser.add_argument("tree", type=str, help="Tree JSON file, or - for stdin")
    validate_parser.add_argument("--json", action="store_true", default=False, help="Output machine-readable JSON report")
    validate_parser.set_defaults(func=tree.validate_cmd)

    # --- render command ---
    render_parser = subparsers.add_parser(
        "render",
        help="Print a tree as indented text",
        description="Render a tree for debugging. Structurally invalid trees are rendered as-is.",
    )
    render_parser.add_argument("tree", type=str, help="Tree JSON file, or - for stdin")
    render_parser.add_argument("--out", "-o", type=str, default=None, help="Output file (default: stdout)")
    render_parser.set_defaults(func=tree.render_cmd)

    # --- bench command ---
    bench_parser = subparsers.add_parser(
        "bench",
        help="Benchmark tree and proof operations",
        description="Time build, prove and multi-proof operations over random leaves.",
    )
    bench_parser.add_argument(
        "--sizes",
        type=positive_int,
        nargs="+",
        default=DEFAULT_SIZES,
        help=f"Leaf counts to benchmark (default: {' '.join(str(s) for s in DEFAULT_SIZES)})",
    )
    bench_parser.add_argument(
        "--iterations",
        type=positive_int,
        default=5,
        help="Repetitions per operation (default: 5)",
    )
    bench_parser.add_argument("--json", action="store_true", default=False, help="Output machine-readable JSON")
    bench_parser.set_defaults(func=bench.bench_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="merkle.json",
        help="Path for config file (default: merkle.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("You can also use environment variables (MERKLE_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps({
            "cli": asdict(args.cli_config),
            "runtime": args.runtime.to_dict(),
        }, indent=2))
        return EXIT_SUCCESS

    print("Usage: merkle config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def _report_error(error: MerkleException, as_json: bool) -> None:
    if as_json:
        print(error.to_error_model().model_dump_json(indent=2), file=sys.stderr)
    else:
        print(f"Error [{error.code}]: {error.message}", file=sys.stderr)


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    load_env_file()

    try:
        config = load_config(args.config)
        runtime_config = load_runtime_config(args.runtime_config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    set_default_config(runtime_config)

    log_level = args.log_level or ("DEBUG" if runtime_config.debug else config.log_level)
    setup_logging(level=log_level, log_file=config.log_file)

    args.cli_config = config
    args.runtime = runtime_config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except MerkleException as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        as_json = getattr(args, "json", False) or config.default_output_format == "json"
        _report_error(e, as_json)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
