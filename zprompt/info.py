"""Repository information consumed by the renderer.

The renderer never talks to git directly; it asks a `RepoInfo` for each fact it needs, and only
when an element actually needs it. Two implementations exist:

- `zprompt.git_ops.GitInfo`: the real provider, shelling out to `git` and caching answers.
- `NoRepoInfo`: a stub for "not inside a repository", used by `--no-git` and tests.

Implementations are free to cache; the renderer assumes every query is idempotent.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import PurePath
from typing import Protocol


class Domain(IntEnum):
    """Host of the upstream remote. Values are the indices used by `%(o...)`."""

    GIT = 0
    GITHUB = 1
    GITLAB = 2
    BITBUCKET = 3
    AZURE = 4


class RepoInfo(Protocol):
    def current_path(self) -> PurePath: ...

    def git_exists(self) -> bool: ...

    def git_dirty(self) -> bool: ...

    def git_modified(self) -> bool: ...

    def git_staged(self) -> bool: ...

    def git_remote_domain(self) -> Domain: ...

    def git_remote_ahead(self) -> int: ...

    def git_remote_behind(self) -> int: ...

    def git_branch(self) -> str: ...

    def git_stashes(self) -> int: ...


@dataclass
class NoRepoInfo:
    """Provider for a directory outside any git repository."""

    path: PurePath = field(default_factory=PurePath)

    def current_path(self) -> PurePath:
        return self.path

    def git_exists(self) -> bool:
        return False

    def git_dirty(self) -> bool:
        return False

    def git_modified(self) -> bool:
        return False

    def git_staged(self) -> bool:
        return False

    def git_remote_domain(self) -> Domain:
        return Domain.GIT

    def git_remote_ahead(self) -> int:
        return 0

    def git_remote_behind(self) -> int:
        return 0

    def git_branch(self) -> str:
        return ""

    def git_stashes(self) -> int:
        return 0


def logical_cwd(environ: Mapping[str, str] | None = None) -> PurePath:
    """Return `$PWD` when set, else the OS working directory, else the empty path.

    `$PWD` keeps symlinks unresolved, matching the path the shell shows.
    """
    env = os.environ if environ is None else environ
    pwd = env.get("PWD")
    if pwd is not None:
        return PurePath(pwd)
    try:
        return PurePath(os.getcwd())
    except OSError:
        return PurePath()
