"""Working directory change detection for a single blob."""

from __future__ import annotations

from loguru import logger

from .repository import RepositoryProvider
from .resolver import ResolverContractError


def has_changes_in_working_directory(
    provider: RepositoryProvider,
    repository_dir: str,
    commitish: str,
    path: str,
) -> bool:
    """
    Check if a file in the working directory has changed since a commit-ish.

    The commit-ish might be a commit SHA, a tag or a remote branch, typically
    the one returned by resolve_blob.

    Raises:
        ResolverContractError: If commitish doesn't resolve to a commit
    """
    with provider.open(repository_dir) as repository:
        commit = repository.lookup_commit(commitish)
        if commit is None:
            raise ResolverContractError(f"Can't resolve commit-ish {commitish!r}")

        changed = len(repository.diff_to_working_directory(commit, [path])) > 0
        logger.debug(f"{path} {'differs from' if changed else 'matches'} {commitish}")
        return changed
