"""Remote URL host extraction and forge classification.

`classify_remote()` maps the URL of a git remote to a `zprompt.info.Domain`:

- URLs with a scheme (`https://github.com/user/repo`, `ssh://git@host/repo`) use the host that
  `urllib.parse.urlsplit` reports.
- SCP-style remotes (`git@github.com:user/repo.git`) are split on the first `@` and then the first
  `:`; a stray `@` or `:` in any part rejects the URL.

The host is compared case-insensitively against `KNOWN_HOSTS`; anything else, including URLs
with no recognizable host, is `Domain.GIT`.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit

from .info import Domain

KNOWN_HOSTS: dict[str, Domain] = {
    "github.com": Domain.GITHUB,
    "gitlab.com": Domain.GITLAB,
    "bitbucket.org": Domain.BITBUCKET,
    "dev.azure.com": Domain.AZURE,
}


@dataclass(frozen=True)
class ScpUrl:
    """An SCP-style remote: `<user>@<host>:<path>`, none of the parts containing `@` or `:`."""

    user: str
    host: str
    path: str

    @classmethod
    def parse(cls, raw: str) -> ScpUrl | None:
        user, at, rest = raw.partition("@")
        if not at:
            return None
        host, colon, path = rest.partition(":")
        if not colon:
            return None
        if ":" in user or "@" in host or ":" in path or "@" in path:
            return None
        return cls(user=user, host=host, path=path)


def remote_host(url: str) -> str | None:
    """Return the host of a remote URL, trying a scheme URL first and SCP syntax second."""
    try:
        parts = urlsplit(url)
        host = parts.hostname if parts.scheme else None
    except ValueError:
        host = None
    if host:
        return host
    scp = ScpUrl.parse(url)
    if scp is None:
        return None
    return scp.host


def classify_remote(url: str) -> Domain:
    host = remote_host(url)
    if host is None:
        return Domain.GIT
    return KNOWN_HOSTS.get(host.lower(), Domain.GIT)
