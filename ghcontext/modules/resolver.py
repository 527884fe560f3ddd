"""
ghcontext - Treeish/Blob Resolver

Maps a context's "<treeish_path>/<blob_name>" onto a commit-ish and a blob path.

Branch names may contain "/", so "release/v2/src/app.py" could be branch
"release" + "v2/src/app.py" or branch "release/v2" + "src/app.py". Every split
point is tried left to right against the repository's remote branches and
tags, and the first (shortest) commit-ish that exists wins.
"""

from __future__ import annotations

from typing import Iterator, Optional, Tuple

from loguru import logger

from .repository import RepositoryProvider, is_object_id
from .schemas import GitHubContext, ResolvedBlob

DEFAULT_REMOTE_NAME = "origin"


class ResolverContractError(ValueError):
    """Raised when the resolver is called with missing arguments."""


def iter_objectish(objectish_path: str) -> Iterator[Tuple[str, str]]:
    """
    Yield every (commitish, path) split of objectish_path, leftmost first.

    "a/b/c/file" -> ("a", "b/c/file"), ("a/b", "c/file"), ("a/b/c", "file")
    """
    index = objectish_path.find("/", 1)
    while index != -1:
        yield objectish_path[:index], objectish_path[index + 1:]
        index = objectish_path.find("/", index + 1)


def resolve_blob(
    provider: RepositoryProvider,
    repository_dir: Optional[str],
    context: Optional[GitHubContext],
    remote_name: str = DEFAULT_REMOTE_NAME,
) -> ResolvedBlob:
    """
    Map from a context to a repository blob.

    Args:
        provider: Opens the repository at repository_dir
        repository_dir: Working directory of the target repository
        context: Context with treeish_path and blob_name set
        remote_name: Remote whose branches are searched

    Returns:
        ResolvedBlob(commitish, path, commit_sha). path is None if the
        commit-ish resolved but the blob doesn't exist at that revision.
        All None if nothing resolved or the context isn't a blob.

    Raises:
        ResolverContractError: If repository_dir or context is None
    """
    if repository_dir is None:
        raise ResolverContractError("repository_dir is required")
    if context is None:
        raise ResolverContractError("context is required")

    with provider.open(repository_dir) as repository:
        if context.treeish_path is None:
            # Blobs without a treeish path aren't supported
            return ResolvedBlob.empty()

        if context.blob_name is None:
            # Not a blob
            return ResolvedBlob.empty()

        objectish_path = f"{context.treeish_path}/{context.blob_name}"
        candidates = list(iter_objectish(objectish_path))
        if not candidates:
            return ResolvedBlob.empty()

        commit_sha, path = candidates[0]
        if is_object_id(commit_sha) and repository.lookup(commit_sha) is not None:
            if repository.lookup(f"{commit_sha}:{path}") is not None:
                logger.debug(f"Resolved {objectish_path!r} as commit {commit_sha}")
                return ResolvedBlob(commit_sha, path, commit_sha)

        for commitish, path in candidates:
            for ref in (f"refs/remotes/{remote_name}/{commitish}", f"refs/tags/{commitish}"):
                commit = repository.lookup_commit(ref)
                if commit is None:
                    continue

                if repository.lookup(f"{ref}:{path}") is not None:
                    logger.debug(f"Resolved {objectish_path!r} as {ref} + {path!r}")
                    return ResolvedBlob(ref, path, commit.hexsha)

                # Resolved the commit-ish but not the path
                logger.debug(f"Resolved {ref} but {path!r} doesn't exist there")
                return ResolvedBlob(ref, None, commit.hexsha)

        logger.debug(f"No commit-ish found in {objectish_path!r}")
        return ResolvedBlob.empty()
