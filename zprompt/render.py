'''Rendering parsed prompts back to text.

`expand()` is the public entry point: it parses a prompt and writes the rendered result to a
sink (anything with a ``write(str)`` method, such as `sys.stdout` or an `io.StringIO`).

Rendering rules
- Characters are written as-is.
- Escapes the engine does not extend are written back in their original syntax, so a prompt
  without git extensions comes out unchanged and zsh still gets to expand it afterwards.
- `%r`, `%p`, `%q`, `%x` write the branch name and the ahead, behind and stash counts.
- Conditionals with a git predicate (`G y m s o p q x`) test the predicate first and then render
  only the chosen branch; the other branch is never visited, so it costs no git queries.
  Numeric arguments default to 0:
  - `G`: inside a repository; `y`: dirty; `m`: modified files; `s`: staged files
  - `o`: remote domain equals `n` (see `zprompt.info.Domain`)
  - `p` / `q` / `x`: at least `n` commits ahead / behind, at least `n` stashes
- Conditionals with any other predicate are written back around both rendered branches, since
  their outcome is for zsh to decide.
- Advanced conditionals `%(o...)`, `%(p...)`, `%(q...)`, `%(x...)` pick the branch at the index
  given by the domain, ahead, behind or stash count; indices past the end pick the last branch.
- Path prefixes (`%d{...}`, `%/{...}`) render the current path after alias substitution and
  component trimming (see `render_path`).

Errors
Rendering itself never fails; anything the sink raises (typically `OSError`) propagates to the
caller unchanged.
'''

from __future__ import annotations

import io
import os
from collections.abc import Iterable
from pathlib import PurePath
from typing import Protocol

from .elements import (
    AdvancedConditional,
    Character,
    Conditional,
    DateFormat,
    Element,
    Escape,
    EscapeLiteral,
    NamedColor,
    NumericEscape,
    PathPrefix,
    Truncation,
)
from .grammar import EXTENSION_CONDITIONALS
from .info import RepoInfo
from .parser import parse


class Sink(Protocol):
    def write(self, s: str, /) -> object: ...


def _num(elem: NumericEscape | NamedColor | Conditional | Truncation) -> str:
    if elem.num_text is not None:
        return elem.num_text
    return "" if elem.num is None else str(elem.num)


def render_escape(esc: Escape, info: RepoInfo) -> str:
    if esc.code == "r":
        return info.git_branch()
    if esc.code == "p":
        return str(info.git_remote_ahead())
    if esc.code == "q":
        return str(info.git_remote_behind())
    if esc.code == "x":
        return str(info.git_stashes())
    return f"%{esc.code}"


def render_path(prefix: PathPrefix, info: RepoInfo) -> str:
    """Render the current path for a `%d{...}` / `%/{...}` element.

    1. The first (alias, prefix) pair whose prefix matches the leading path components replaces
       them with the alias; later pairs are not tried.
    2. A positive argument keeps the last `n` components, a negative one the first `-n`.
    3. A trailing separator is dropped unless the whole result is the root.
    """
    parts = info.current_path().parts
    for alias, sub in prefix.prefix_subs:
        sub_parts = PurePath(sub).parts
        if parts[: len(sub_parts)] == sub_parts:
            parts = PurePath(alias).parts + parts[len(sub_parts) :]
            break

    num = prefix.num or 0
    if num > 0:
        parts = parts[-num:]
    elif num < 0:
        parts = parts[:-num]

    if not parts:
        return ""
    path = str(PurePath(*parts))
    if path != os.sep and path.endswith(os.sep):
        path = path[: -len(os.sep)]
    return path


def _predicate(cond: Conditional, info: RepoInfo) -> bool:
    num = cond.num or 0
    code = cond.code
    if code == "G":
        return info.git_exists()
    if code == "y":
        return info.git_dirty()
    if code == "m":
        return info.git_modified()
    if code == "s":
        return info.git_staged()
    if code == "o":
        return int(info.git_remote_domain()) == num
    if code == "p":
        return info.git_remote_ahead() >= num
    if code == "q":
        return info.git_remote_behind() >= num
    if code == "x":
        return info.git_stashes() >= num
    raise ValueError(f"Not a git predicate: {code!r}")


def _selector(cond: AdvancedConditional, info: RepoInfo) -> int:
    if cond.code == "o":
        return int(info.git_remote_domain())
    if cond.code == "p":
        return info.git_remote_ahead()
    if cond.code == "q":
        return info.git_remote_behind()
    if cond.code == "x":
        return info.git_stashes()
    raise ValueError(f"Not an advanced conditional predicate: {cond.code!r}")


def render_conditional(cond: Conditional, out: Sink, info: RepoInfo) -> None:
    if cond.code in EXTENSION_CONDITIONALS:
        branch = cond.true_branch if _predicate(cond, info) else cond.false_branch
        render(branch, out, info)
        return

    out.write(f"%{_num(cond)}({cond.code}{cond.delim}")
    render(cond.true_branch, out, info)
    out.write(cond.delim)
    render(cond.false_branch, out, info)
    out.write(")")


def render_advanced_conditional(cond: AdvancedConditional, out: Sink, info: RepoInfo) -> None:
    index = _selector(cond, info)
    if 0 <= index < len(cond.conditions):
        render(cond.conditions[index], out, info)
    else:
        render(cond.conditions[-1], out, info)


def render_element(elem: Element, out: Sink, info: RepoInfo) -> None:
    if isinstance(elem, Character):
        out.write(elem.char)
    elif isinstance(elem, Escape):
        out.write(render_escape(elem, info))
    elif isinstance(elem, NumericEscape):
        out.write(f"%{_num(elem)}{elem.code}")
    elif isinstance(elem, DateFormat):
        out.write(f"%D{{{elem.fmt}}}")
    elif isinstance(elem, NamedColor):
        out.write(f"%{_num(elem)}{elem.code}{{{elem.name}}}")
    elif isinstance(elem, PathPrefix):
        out.write(render_path(elem, info))
    elif isinstance(elem, EscapeLiteral):
        out.write(f"%{{{elem.text}%}}")
    elif isinstance(elem, Conditional):
        render_conditional(elem, out, info)
    elif isinstance(elem, AdvancedConditional):
        render_advanced_conditional(elem, out, info)
    elif isinstance(elem, Truncation):
        out.write(f"%{_num(elem)}{elem.code}{elem.replacement}{elem.code}")
    else:
        raise TypeError(f"Unknown element: {elem!r}")


def render(elements: Iterable[Element], out: Sink, info: RepoInfo) -> None:
    for elem in elements:
        render_element(elem, out, info)


def expand(prompt: str, info: RepoInfo, out: Sink) -> None:
    """Expand the git extensions in `prompt` and write the result to `out`.

    Standard zsh escapes are left for zsh; this adds:

    - `%r`: short name of the current branch (empty outside a repository)
    - `%p` / `%q`: commits ahead of / behind the upstream branch (0 without one)
    - `%x`: number of stashes
    - `%(G..)`, `%(y..)`, `%(m..)`, `%(s..)`, `%n(o..)`, `%n(p..)`, `%n(q..)`, `%n(x..)` conditionals
    - `%(o.a.b.c...)`-style advanced conditionals for `o`, `p`, `q`, `x`
    - `%d{:alias:prefix...}` / `%/{...}` path substitutions, e.g. `%/{:~:/home/me}` acts like `%~`
    """
    render(parse(prompt), out, info)


def expand_to_string(prompt: str, info: RepoInfo) -> str:
    buf = io.StringIO()
    expand(prompt, info, buf)
    return buf.getvalue()
