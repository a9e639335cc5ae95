"""Module entrypoint for ``python -m zprompt``.

A thin wrapper around :func:`zprompt.cli.main`; the CLI return code becomes the process exit
status through ``SystemExit``. Equivalent to the ``zprompt`` console script.
"""

from __future__ import annotations

from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
