"""zprompt: git-aware expansion of zsh prompt strings.

zprompt takes a zsh prompt template and expands a small set of git extensions in it, leaving
every standard zsh escape untouched so zsh can expand the result as usual. It is meant to run
from a `precmd` hook (`PROMPT="$(zprompt '...')"`) or to fill `$psvar` in one call.

What zprompt provides
- An expansion engine (`zprompt.render.expand`) built from:
  - grammar rules for each escape form (`zprompt.grammar`),
  - a total parser producing an immutable element tree (`zprompt.parser`, `zprompt.elements`),
  - a renderer that evaluates git conditionals lazily (`zprompt.render`).
- A repository-info protocol (`zprompt.info.RepoInfo`) with a git-backed implementation
  (`zprompt.git_ops.GitInfo`) and a no-repository stub (`zprompt.info.NoRepoInfo`).
- A CLI (`zprompt.cli:main`, also `python -m zprompt`).

Extensions
- `%r` branch, `%p` ahead, `%q` behind, `%x` stashes.
- Conditional predicates `G` (in repo), `y` (dirty), `m` (modified), `s` (staged), `o` (remote
  domain), `p`/`q` (ahead/behind at least n), `x` (at least n stashes).
- Multi-armed `%(o.a.b.c)`-style conditionals for `o`, `p`, `q`, `x`.
- Path substitution `%d{:alias:prefix...}` / `%/{...}`.

Important invariants
- Parsing never fails; malformed escapes are emitted literally.
- Only the selected branch of a git conditional is rendered, so unused branches never query git.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
