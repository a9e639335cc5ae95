"""Git-backed repository information for prompt expansion.

`GitInfo` implements `zprompt.info.RepoInfo` by shelling out to `git` via `subprocess`. Each
fact is computed at most once per instance and cached, so a prompt that mentions `%p` five times
still runs `git rev-list` once, and a prompt that never asks for stashes never runs `git stash`.

Queries (all run with `cwd=self.cwd`)
- `git_exists()`: `git rev-parse --git-dir` exits 0.
- `git_dirty()` / `git_modified()` / `git_staged()`: one `git status --porcelain` call.
  - dirty: any status entry at all (untracked files included)
  - modified: an untracked entry, or a worktree column of `M`, `R` or `T`
  - staged: an index column of `A`, `M`, `D`, `R` or `T`
- `git_remote_domain()` / `git_remote_ahead()` / `git_remote_behind()`: resolve the upstream
  (`@{upstream}`, e.g. `origin/main`), count commits with
  `git rev-list --left-right --count HEAD...@{upstream}`, and classify the URL of the upstream's
  remote (`git remote get-url origin`) via `zprompt.remote.classify_remote`. Without an upstream
  the answer is `(Domain.GIT, 0, 0)`.
- `git_branch()`: `git rev-parse --abbrev-ref HEAD` (`HEAD` when detached, empty when unborn).
- `git_stashes()`: number of lines printed by `git stash list`.
- `current_path()`: `zprompt.info.logical_cwd(env)`.

Failure semantics
A prompt must render even when git is unhappy, so nothing here raises for git problems: a
missing `git` executable or a non-zero exit is "no answer" and maps to the no-repository value
(False, 0, "" or `Domain.GIT`). Every query short-circuits to that value when `git_exists()` is
False, without running further commands.

Tracing
With `trace=True`, every git command is reported on stderr with its exit status
(`[zprompt] git status --porcelain -> 0`). The CLI turns this on via `ZPROMPT_TRACE`.
"""

from __future__ import annotations

import subprocess
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path, PurePath

from .info import Domain, logical_cwd
from .remote import classify_remote


@dataclass(frozen=True)
class GitStatus:
    dirty: bool = False
    modified: bool = False
    staged: bool = False


@dataclass(frozen=True)
class RemoteInfo:
    domain: Domain = Domain.GIT
    ahead: int = 0
    behind: int = 0


def parse_status(porcelain: str) -> GitStatus:
    """Summarize `git status --porcelain` (v1) output."""
    dirty = modified = staged = False
    for line in porcelain.splitlines():
        if len(line) < 2:
            continue
        dirty = True
        index, worktree = line[0], line[1]
        if line.startswith("??") or worktree in "MRT":
            modified = True
        if index in "AMDRT":
            staged = True
        if modified and staged:
            break
    return GitStatus(dirty=dirty, modified=modified, staged=staged)


def parse_ahead_behind(out: str) -> tuple[int, int]:
    """Parse `rev-list --left-right --count` output (`<ahead>\\t<behind>`)."""
    fields = out.split()
    if len(fields) != 2:
        return 0, 0
    try:
        return int(fields[0]), int(fields[1])
    except ValueError:
        return 0, 0


class GitInfo:
    def __init__(self, *, cwd: Path | None = None, env: Mapping[str, str] | None = None, trace: bool = False) -> None:
        self.cwd = cwd
        self.env = env
        self.trace = trace
        self._path: PurePath | None = None
        self._exists: bool | None = None
        self._status: GitStatus | None = None
        self._remote: RemoteInfo | None = None
        self._branch: str | None = None
        self._stashes: int | None = None

    def current_path(self) -> PurePath:
        if self._path is None:
            self._path = logical_cwd(self.env)
        return self._path

    def git_exists(self) -> bool:
        if self._exists is None:
            self._exists = self._git(["rev-parse", "--git-dir"]) is not None
        return self._exists

    def git_dirty(self) -> bool:
        return self._git_status().dirty

    def git_modified(self) -> bool:
        return self._git_status().modified

    def git_staged(self) -> bool:
        return self._git_status().staged

    def git_remote_domain(self) -> Domain:
        return self._remote_info().domain

    def git_remote_ahead(self) -> int:
        return self._remote_info().ahead

    def git_remote_behind(self) -> int:
        return self._remote_info().behind

    def git_branch(self) -> str:
        if self._branch is None:
            out = self._git(["rev-parse", "--abbrev-ref", "HEAD"]) if self.git_exists() else None
            self._branch = (out or "").strip()
        return self._branch

    def git_stashes(self) -> int:
        if self._stashes is None:
            out = self._git(["stash", "list"]) if self.git_exists() else None
            self._stashes = len([line for line in (out or "").splitlines() if line.strip()])
        return self._stashes

    def _git_status(self) -> GitStatus:
        if self._status is None:
            out = self._git(["status", "--porcelain"]) if self.git_exists() else None
            self._status = parse_status(out) if out is not None else GitStatus()
        return self._status

    def _remote_info(self) -> RemoteInfo:
        if self._remote is None:
            self._remote = self._load_remote_info() if self.git_exists() else RemoteInfo()
        return self._remote

    def _load_remote_info(self) -> RemoteInfo:
        upstream = self._git(["rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{upstream}"])
        if upstream is None or not upstream.strip():
            return RemoteInfo()

        counts = self._git(["rev-list", "--left-right", "--count", "HEAD...@{upstream}"])
        ahead, behind = parse_ahead_behind(counts) if counts is not None else (0, 0)

        remote_name = upstream.strip().split("/", 1)[0]
        url = self._git(["remote", "get-url", remote_name])
        domain = classify_remote(url.strip()) if url is not None else Domain.GIT
        return RemoteInfo(domain=domain, ahead=ahead, behind=behind)

    def _git(self, args: list[str]) -> str | None:
        """Run git and return its stdout, or None if git is missing or exits non-zero."""
        try:
            p = subprocess.run(
                ["git", *args],
                cwd=self.cwd,
                text=True,
                check=False,
                capture_output=True,
            )
        except FileNotFoundError:
            if self.trace:
                print(f"[zprompt] git {' '.join(args)} -> git not found", file=sys.stderr)
            return None
        if self.trace:
            print(f"[zprompt] git {' '.join(args)} -> {p.returncode}", file=sys.stderr)
        if p.returncode != 0:
            return None
        return p.stdout
