"""
Repository access for the resolver and change detector.

RepositoryProvider / RepositoryHandle are the ports the core calls through.
GitRepositoryProvider is the GitPython implementation. A handle is opened,
used and closed within a single call (`with provider.open(path) as repo:`).

Missing objects and refs are reported as None. Anything else (not a
repository, git not installed, corrupt object store) propagates.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, List, Optional, Protocol, Sequence

import git
from git.exc import BadName, BadObject
from git.objects.base import Object
from loguru import logger

_SHA_RE = re.compile(r"[0-9a-fA-F]{40}")

# git check-ref-format rules that matter for names taken from URLs
_INVALID_REF_RE = re.compile(r"\.\.|//|@\{|[\x00-\x20~^:?*\[\\\x7f]|(?:^|/)\.|(?:\.lock|\.|/)$")


def is_object_id(value: str) -> bool:
    """True if value looks like a full 40-character hex object id."""
    return bool(_SHA_RE.fullmatch(value or ""))


def is_valid_ref_name(ref: str) -> bool:
    return bool(ref) and not _INVALID_REF_RE.search(ref)


class RepositoryHandle(Protocol):
    def __enter__(self) -> "RepositoryHandle": ...

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]: ...

    def lookup(self, revision: str) -> Optional[Any]:
        """Look up an object id, ref or rev, optionally suffixed by ":<path>"."""
        ...

    def lookup_commit(self, revision: str) -> Optional[Any]:
        """Look up a commit, peeling annotated tags. None if not a commit."""
        ...

    def diff_to_working_directory(self, commit: Any, paths: Sequence[str]) -> Sequence[str]:
        """Paths among paths whose working directory content differs from commit."""
        ...


class RepositoryProvider(Protocol):
    def open(self, path: str) -> RepositoryHandle: ...


class GitRepository:
    """RepositoryHandle over a GitPython Repo."""

    def __init__(self, repo: git.Repo):
        self._repo = repo

    def __enter__(self) -> "GitRepository":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._repo.close()

    @property
    def working_dir(self) -> Optional[str]:
        return self._repo.working_tree_dir

    def lookup(self, revision: str) -> Optional[Object]:
        # Ref names can't contain ":", so the first one separates rev and path
        rev, sep, path = revision.partition(":")
        obj = self._resolve(rev)
        if obj is None or not sep:
            return obj

        tree = self._peel_to_tree(obj)
        if tree is None:
            return None
        if not path:
            return tree
        try:
            return tree / path
        except KeyError:
            return None

    def lookup_commit(self, revision: str) -> Optional[git.Commit]:
        obj = self._resolve(revision)
        obj = self._peel_tags(obj)
        if isinstance(obj, git.Commit):
            return obj
        return None

    def diff_to_working_directory(self, commit: git.Commit, paths: Sequence[str]) -> List[str]:
        """
        Return the paths whose working directory content differs from commit.

        Files are compared against the commit's tree directly; the index is
        not consulted, so unstaged and untracked files count the same.
        """
        root = Path(self._repo.working_tree_dir)
        changed = []
        for path in paths:
            target = root / path
            try:
                entry = commit.tree / path
            except KeyError:
                entry = None

            if entry is None or entry.type != "blob":
                if target.is_file():
                    changed.append(path)
            elif not target.is_file() or self._hash_file(target) != entry.hexsha:
                changed.append(path)
        return changed

    def _hash_file(self, target: Path) -> str:
        # Runs the clean filters (eol, attributes) before hashing
        return self._repo.git.hash_object("--", str(target)).strip()

    def _resolve(self, rev: str) -> Optional[Object]:
        if not rev:
            return None
        try:
            if is_object_id(rev):
                return Object.new_from_sha(self._repo, bytes.fromhex(rev))
            if rev.startswith("refs/"):
                if not is_valid_ref_name(rev):
                    return None
                return git.Reference(self._repo, rev).object
            return self._repo.rev_parse(rev)
        except (BadName, BadObject, ValueError) as e:
            logger.debug(f"Can't resolve {rev!r}: {e}")
            return None

    @staticmethod
    def _peel_tags(obj: Optional[Object]) -> Optional[Object]:
        while isinstance(obj, git.TagObject):
            obj = obj.object
        return obj

    def _peel_to_tree(self, obj: Object) -> Optional[git.Tree]:
        obj = self._peel_tags(obj)
        if isinstance(obj, git.Commit):
            return obj.tree
        if isinstance(obj, git.Tree):
            return obj
        return None


class GitRepositoryProvider:
    """Opens repositories with GitPython."""

    def open(self, path: str) -> GitRepository:
        logger.debug(f"Opening repository: {path}")
        return GitRepository(git.Repo(path))
