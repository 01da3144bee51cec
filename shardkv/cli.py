#!/usr/bin/env python3
"""
Interactive Client for shardkv

A command-line client for talking to one store or a set of shards.

Usage:
    shardkv-cli                                   # SHARDKV_SHARDS or 127.0.0.1:8888
    shardkv-cli --shard h1:8888 --shard h2:8888   # Explicit shard list
    shardkv-cli get mykey                         # One-shot command
    shardkv-cli --debug                           # Enable debug logging

Input lines are sent as raw commands: COMMAND KEY [ARGS...]. The key picks
the shard; the reply fields are printed one per line.

Client Commands:
    shard <key>        - Show which shard owns a key
    mget <key>...      - Fetch several keys across shards
    help               - Show this help
    exit / quit        - Exit client

Environment Variables:
    SHARDKV_SHARDS     - Comma-separated host:port list
    SHARDKV_TIMEOUT    - Socket timeout in seconds
    SHARDKV_DEBUG      - Enable debug mode (true/false)
"""

import argparse
import logging
import shlex
import sys
from typing import List, Optional

from .cluster.router import Cluster
from .config.settings import settings
from .exceptions import ShardKVError
from .protocol.frame import Frame

# Enable command history with arrow keys (works on Unix systems)
try:
    import readline  # noqa: F401
except ImportError:
    pass  # readline not available on Windows by default

HELP = """
Raw Commands:
-------------
  COMMAND KEY [ARGS...]     Sent to the shard owning KEY, e.g.
                            set mykey myvalue
                            get mykey
                            hset myhash field value
  COMMAND                   Commands without a key go to shard 0

Client Commands:
----------------
  shard <key>               Show the shard that owns <key>
  mget <key>...             Fetch several keys across shards
  help                      Show this help message
  exit                      Exit the client
"""


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="shardkv: client for a sharded key-value store",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--shard",
        dest="shards",
        action="append",
        metavar="HOST:PORT",
        help="Shard address, repeat once per shard in shard order "
             "(default: SHARDKV_SHARDS, else SHARDKV_HOST:SHARDKV_PORT)",
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=settings.TIMEOUT,
        help="Socket timeout in seconds",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        default=settings.DEBUG,
        help="Enable debug logging",
    )

    parser.add_argument(
        "command",
        nargs=argparse.REMAINDER,
        help="Run one command and exit instead of starting the prompt",
    )

    args = parser.parse_args(argv)
    if not args.shards:
        args.shards = settings.SHARDS or [f"{settings.HOST}:{settings.PORT}"]
    return args


def setup_logging(debug: bool = False) -> None:
    """Configure logging based on debug flag."""
    level = logging.DEBUG if debug else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stderr),
        ]
    )


def format_frame(frame: Frame) -> str:
    return "\n".join(frame.fields) if frame.fields else "(empty)"


def run_command(cluster: Cluster, parts: List[str]) -> str:
    """
    Execute one parsed input line and return the text to print.

    Errors from the driver are returned as 'ERROR: ...' lines.
    """
    if not parts:
        return ""

    name = parts[0].lower()
    try:
        if name == "help":
            return HELP

        if name == "shard":
            if len(parts) != 2:
                return "ERROR: usage: shard <key>"
            shard = cluster.shard_of(parts[1])
            address = cluster.shards[shard].address
            return f"{shard} ({address[0]}:{address[1]})"

        if name == "mget":
            if len(parts) < 2:
                return "ERROR: usage: mget <key>..."
            result = cluster.multi_get(parts[1:])
            lines = [f"{key} = {value}" for key, value in result]
            for shard, exc in sorted(result.errors.items()):
                lines.append(f"ERROR: shard {shard}: {exc}")
            return "\n".join(lines) if lines else "(no keys found)"

        if len(parts) == 1:
            return format_frame(cluster.shards[0].execute(name))
        return format_frame(cluster.execute(parts[1], name, *parts[1:]))

    except ShardKVError as exc:
        return f"ERROR: {exc}"


def repl(cluster: Cluster) -> None:
    """Read commands from stdin until exit or EOF."""
    try:
        while True:
            try:
                line = input(">>> ").strip()
            except EOFError:
                print("\nGoodbye!")
                break

            if not line:
                continue
            if line.lower() in ("exit", "quit"):
                print("Goodbye!")
                break

            try:
                parts = shlex.split(line)
            except ValueError as exc:
                print(f"ERROR: {exc}")
                continue

            print(run_command(cluster, parts))

    except KeyboardInterrupt:
        print("\n\nInterrupted. Goodbye!")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the client."""
    args = parse_args(argv)
    setup_logging(debug=args.debug)
    logger = logging.getLogger(__name__)

    logger.debug(f"Connecting to shards: {', '.join(args.shards)}")
    try:
        cluster = Cluster.connect(args.shards, timeout=args.timeout)
    except (OSError, ValueError) as exc:
        print(f"Failed to connect: {exc}", file=sys.stderr)
        return 1

    try:
        if args.command:
            output = run_command(cluster, args.command)
            print(output)
            return 1 if output.startswith("ERROR") else 0

        print(f"Connected to {cluster.num_shards} shard(s). Type 'help' for commands.\n")
        repl(cluster)
        return 0
    finally:
        cluster.close()


if __name__ == "__main__":
    sys.exit(main())
