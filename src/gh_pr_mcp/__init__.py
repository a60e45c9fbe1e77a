"""GitHub Pull Request MCP Server.

A Model Context Protocol server that exposes a small, fixed set of pull request
operations backed by the locally installed and already authenticated GitHub CLI.

Features:
- create, list, view, and comment on pull requests
- declarative argument validation per tool
- gh invoked with an argument vector (never through a shell)
- JSONL audit trail of every tool call

Run with: uvx python -m gh_pr_mcp
"""

__version__ = "0.1.0"
