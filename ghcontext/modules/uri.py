"""
Repository URL parsing.

Splits an HTTP(S) URL into host, owner, repository name and the sub-path after
the repository root. Port and userinfo never leak into the sub-path.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlsplit

# GitHub login: alphanumeric start, then alphanumerics, "-" or "_"
OWNER_PATTERN = r"[a-zA-Z0-9][a-zA-Z0-9\-_]*"

# Repository name: word characters, "." or "-"
REPO_PATTERN = r"(?:\w|\.|-)+"

_OWNER_RE = re.compile(OWNER_PATTERN)
_REPO_RE = re.compile(REPO_PATTERN)

# Leading "owner/repo" of a URL path and whatever follows it
_REPOSITORY_PATH_RE = re.compile(r"/*(?P<owner>[^/]+)/+(?P<repo>[^/]+)(?P<rest>.*)", re.DOTALL)

_DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass(frozen=True)
class RepositoryUri:
    url: str
    scheme: str
    host: str
    port: Optional[int]
    owner: str
    repository_name: str
    # Everything after "<owner>/<repo>/" including query and fragment.
    # None when nothing follows the repository root.
    sub_path: Optional[str] = None

    @classmethod
    def parse(cls, url: Optional[str]) -> Optional["RepositoryUri"]:
        """Parse url, returning None unless it is http(s) with an owner/repo path."""
        if not url:
            return None

        url = url.strip()
        try:
            parts = urlsplit(url)
            port = parts.port
        except ValueError:
            return None

        scheme = parts.scheme.lower()
        if scheme not in _DEFAULT_PORTS or not parts.hostname:
            return None

        match = _REPOSITORY_PATH_RE.match(parts.path)
        if not match:
            return None

        owner, repository_name = match.group("owner"), match.group("repo")
        if repository_name.endswith(".git"):
            repository_name = repository_name[: -len(".git")]

        if not _OWNER_RE.fullmatch(owner) or not _REPO_RE.fullmatch(repository_name):
            return None

        if port == _DEFAULT_PORTS[scheme]:
            port = None

        return cls(
            url=url,
            scheme=scheme,
            host=parts.hostname,
            port=port,
            owner=owner,
            repository_name=repository_name,
            sub_path=_sub_path(match.group("rest"), parts.query, parts.fragment),
        )

    @property
    def repository_url(self) -> str:
        netloc = self.host if self.port is None else f"{self.host}:{self.port}"
        return f"{self.scheme}://{netloc}/{self.owner}/{self.repository_name}"

    def sub_path_after(self, prefix: str) -> Optional[str]:
        """Return the sub-path following prefix (case-insensitive), or None."""
        if self.sub_path is None or not self.sub_path.lower().startswith(prefix.lower()):
            return None
        return self.sub_path[len(prefix):]


def _sub_path(rest: str, query: str, fragment: str) -> Optional[str]:
    if not rest.startswith("/"):
        return None

    sub_path = rest[1:]
    if query:
        sub_path += f"?{query}"
    if fragment:
        sub_path += f"#{fragment}"
    return sub_path
