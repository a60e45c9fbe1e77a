"""Typed tool arguments and gh command construction.

Builders append a flag only when its field is present. The process always receives
``GhCommand.args``; ``GhCommand.suffix`` is a display rendering for logs and audit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable


@dataclass(frozen=True, slots=True)
class CreatePrArgs:
    title: str
    body: str | None = None
    base: str | None = None
    head: str | None = None
    draft: bool | None = None


@dataclass(frozen=True, slots=True)
class ListPrsArgs:
    state: str | None = None
    base: str | None = None
    limit: int | float | None = None


@dataclass(frozen=True, slots=True)
class ViewPrArgs:
    number: int


@dataclass(frozen=True, slots=True)
class CommentPrArgs:
    number: int
    body: str


@dataclass(slots=True)
class GhCommand:
    """Argument vector for a single gh invocation."""

    args: list[str] = field(default_factory=list)
    _display: list[str] = field(default_factory=list, repr=False)

    def word(self, *tokens: str) -> GhCommand:
        """Append literal tokens (subcommands, positional values)."""
        self.args.extend(tokens)
        self._display.extend(tokens)
        return self

    def option(self, name: str, value: object, *, quoted: bool = False) -> GhCommand:
        """Append ``name value``; the display form wraps text values in double quotes."""
        text = str(value)
        self.args.extend((name, text))
        self._display.extend((name, f'"{text}"' if quoted else text))
        return self

    def switch(self, name: str) -> GhCommand:
        """Append a bare boolean flag."""
        return self.word(name)

    @property
    def suffix(self) -> str:
        return " ".join(self._display)


def build_create_pr(args: CreatePrArgs) -> GhCommand:
    cmd = GhCommand().word("pr", "create").option("--title", args.title, quoted=True)
    if args.body is not None:
        cmd.option("--body", args.body, quoted=True)
    if args.base is not None:
        cmd.option("--base", args.base, quoted=True)
    if args.head is not None:
        cmd.option("--head", args.head, quoted=True)
    if args.draft:
        cmd.switch("--draft")
    return cmd


def build_list_prs(args: ListPrsArgs) -> GhCommand:
    cmd = GhCommand().word("pr", "list")
    if args.state is not None:
        cmd.option("--state", args.state)
    if args.base is not None:
        cmd.option("--base", args.base)
    if args.limit is not None:
        cmd.option("--limit", args.limit)
    return cmd


def build_view_pr(args: ViewPrArgs) -> GhCommand:
    return GhCommand().word("pr", "view", str(args.number))


def build_comment_pr(args: CommentPrArgs) -> GhCommand:
    return GhCommand().word("pr", "comment", str(args.number)).option("--body", args.body, quoted=True)


# tool name -> (typed argument record, builder)
COMMAND_BUILDERS: dict[str, tuple[type, Callable[[Any], GhCommand]]] = {
    "create_pr": (CreatePrArgs, build_create_pr),
    "list_prs": (ListPrsArgs, build_list_prs),
    "view_pr": (ViewPrArgs, build_view_pr),
    "comment_pr": (CommentPrArgs, build_comment_pr),
}


def build_command(tool_name: str, validated: dict[str, Any]) -> GhCommand:
    """Build the gh command for a tool from already-validated arguments."""
    record_type, builder = COMMAND_BUILDERS[tool_name]
    return builder(record_type(**validated))
