#!/usr/bin/env python3
"""gh-pr-mcp MCP Server entry point.

Run:
  uvx python -m gh_pr_mcp                # start server (stdio)
  uvx python -m gh_pr_mcp --test         # run lightweight self-tests then exit
"""

import argparse
import asyncio
import sys

from gh_pr_mcp.server import run_server, test_server


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(prog="gh_pr_mcp", add_help=True)
    parser.add_argument(
        "--test",
        action="store_true",
        help="Run built-in server self tests (tool & resource listing) then exit.",
    )
    return parser.parse_args(argv)


def main() -> None:
    """CLI dispatcher for the MCP server."""
    args = parse_args(sys.argv[1:])
    try:
        if args.test:
            asyncio.run(test_server())
            print("Self-test passed", file=sys.stderr)
        else:
            asyncio.run(run_server())
    except KeyboardInterrupt:
        print("\nServer stopped by user", file=sys.stderr)
    except Exception as exc:  # pylint: disable=broad-exception-caught
        print(f"Server error: {exc}", file=sys.stderr)
        raise


if __name__ == "__main__":
    main()
