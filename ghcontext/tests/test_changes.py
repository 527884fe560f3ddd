"""
Tests for working directory change detection.
"""

from pathlib import Path

import pytest

from ghcontext.modules.changes import has_changes_in_working_directory
from ghcontext.modules.repository import GitRepositoryProvider
from ghcontext.modules.resolver import ResolverContractError


@pytest.fixture
def provider():
    return GitRepositoryProvider()


def test_unchanged_file(provider, git_repo):
    assert has_changes_in_working_directory(provider, git_repo.path, "refs/remotes/origin/main", "README.md") is False


def test_modified_file(provider, git_repo):
    Path(git_repo.path, "src", "x.txt").write_text("changed\n", encoding="utf-8")

    assert has_changes_in_working_directory(provider, git_repo.path, "refs/remotes/origin/main", "src/x.txt") is True


def test_only_named_path_is_compared(provider, git_repo):
    Path(git_repo.path, "src", "x.txt").write_text("changed\n", encoding="utf-8")

    assert has_changes_in_working_directory(provider, git_repo.path, "refs/remotes/origin/main", "README.md") is False


def test_file_changed_since_older_commit(provider, git_repo):
    # v2/file.txt doesn't exist at origin/main, only in the working tree
    assert has_changes_in_working_directory(provider, git_repo.path, "refs/remotes/origin/main", "v2/file.txt") is True
    assert has_changes_in_working_directory(provider, git_repo.path, "refs/remotes/origin/release", "v2/file.txt") is False


def test_commit_sha_and_tag(provider, git_repo):
    assert has_changes_in_working_directory(provider, git_repo.path, git_repo.base.hexsha, "x.txt") is False
    assert has_changes_in_working_directory(provider, git_repo.path, "refs/tags/v1.0", "x.txt") is False


def test_deleted_file(provider, git_repo):
    Path(git_repo.path, "x.txt").unlink()

    assert has_changes_in_working_directory(provider, git_repo.path, "refs/remotes/origin/main", "x.txt") is True


def test_unresolvable_commitish(provider, git_repo):
    with pytest.raises(ResolverContractError):
        has_changes_in_working_directory(provider, git_repo.path, "refs/remotes/origin/nope", "x.txt")


def test_unstaged_removal_with_same_content(provider, git_repo):
    # Removed from the index only; the working file is untouched
    git_repo.repo.git.rm("--cached", "x.txt")

    assert has_changes_in_working_directory(provider, git_repo.path, "refs/remotes/origin/main", "x.txt") is False


def test_untracked_file_with_same_content(provider, git_repo):
    # v2/file.txt matches origin/release but is no longer tracked
    git_repo.repo.git.rm("--cached", "v2/file.txt")

    assert has_changes_in_working_directory(provider, git_repo.path, "refs/remotes/origin/release", "v2/file.txt") is False
    assert has_changes_in_working_directory(provider, git_repo.path, "refs/remotes/origin/main", "v2/file.txt") is True


def test_staged_edit_is_still_a_change(provider, git_repo):
    Path(git_repo.path, "README.md").write_text("staged\n", encoding="utf-8")
    git_repo.repo.index.add(["README.md"])

    assert has_changes_in_working_directory(provider, git_repo.path, "refs/remotes/origin/main", "README.md") is True


def test_directory_path(provider, git_repo):
    # A tree entry isn't a file, so there's nothing to compare
    assert has_changes_in_working_directory(provider, git_repo.path, "refs/remotes/origin/main", "src") is False
