"""zprompt.cli

Command-line entrypoint: expand git extensions in zsh prompt strings.

Entry points
- `zprompt.cli:main`
- `python3 -m zprompt ...` (delegates to this module)

Usage
- `zprompt '%(G.%r%(y.*.).)'`
- `zprompt -0 '%r' '%p' '%q'` (NUL-separated, e.g. to fill `$psvar` in one call)

Each positional prompt is expanded and written to stdout; multiple prompts are separated by
`--sep` (default newline) or by NUL with `-0/--null`. Nothing follows the last prompt. A single
repository provider is shared by all prompts, so git is queried at most once per fact.

Flags
- `-s/--sep <char>`: separator between prompts (exactly one character).
- `-0/--null`: use NUL as the separator; overrides `--sep`.
- `--no-git`: expand as if outside any repository (no git commands are run).
- `--version`: print the version and exit.

Environment
- `PWD`: logical working directory used by `%d{...}` / `%/{...}`.
- `ZPROMPT_TRACE`: when non-empty, every git command is reported on stderr.

Exceptions are not caught here: argparse exits with status 2 on bad usage, and a failing stdout
surfaces as an uncaught `OSError`.
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from . import __version__
from .git_ops import GitInfo
from .info import NoRepoInfo, RepoInfo, logical_cwd
from .render import expand


def _single_char(value: str) -> str:
    if len(value) != 1:
        raise argparse.ArgumentTypeError(f"separator must be a single character, got {value!r}")
    return value


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="zprompt", description="Expand git extensions in zsh prompt strings.")
    p.add_argument(
        "prompts",
        nargs="*",
        help="zsh-style prompts to expand. Multiple prompts are written separated by --sep.",
    )
    p.add_argument(
        "-s",
        "--sep",
        type=_single_char,
        default="\n",
        help="Separator written between prompts (default: newline).",
    )
    p.add_argument(
        "-0",
        "--null",
        action="store_true",
        help="Separate prompts with NUL instead of --sep.",
    )
    p.add_argument(
        "--no-git",
        action="store_true",
        help="Expand as if outside any git repository. Does not run git.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def build_info(*, no_git: bool) -> RepoInfo:
    if no_git:
        return NoRepoInfo(path=logical_cwd())
    trace = bool(os.environ.get("ZPROMPT_TRACE"))
    return GitInfo(cwd=Path.cwd(), trace=trace)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(sys.argv[1:] if argv is None else argv)
    sep = "\0" if args.null else args.sep
    info = build_info(no_git=bool(args.no_git))

    out = sys.stdout
    for i, prompt in enumerate(args.prompts):
        if i:
            out.write(sep)
        expand(prompt, info, out)
    out.flush()
    return 0
