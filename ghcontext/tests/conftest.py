# Pytest configuration for the ghcontext test suite
#
# Timeout strategy:
# - FAST tests: 10s (pure unit tests, no I/O)
# - MEDIUM tests: 30s (real git repositories in tmp_path)

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace
from typing import Dict

import git
import pytest

# ---------------------------------------------------------------------------
# Timeout configuration by test file
# ---------------------------------------------------------------------------

TIMEOUT_MAP = {
    # MEDIUM tests (30s) - build git repositories
    "test_resolver": 30,
    "test_changes": 30,
    "test_repository": 30,
    "test_cli": 30,

    # FAST tests (10s) - Pure unit tests
    "test_schemas": 10,
    "test_uri": 10,
    "test_extractor": 10,
    "test_config": 10,
    "test_integration": 10,
}


def pytest_collection_modifyitems(config, items):
    """Apply timeout markers based on test file names."""
    for item in items:
        test_name = Path(str(item.fspath)).stem

        timeout = 30  # default
        for pattern, t in TIMEOUT_MAP.items():
            if pattern in test_name:
                timeout = t
                break

        if item.get_closest_marker("timeout") is None:
            item.add_marker(pytest.mark.timeout(timeout))


# ---------------------------------------------------------------------------
# Git fixtures
# ---------------------------------------------------------------------------

ACTOR = git.Actor("ghcontext tests", "tests@example.com")


def commit_files(repo: git.Repo, files: Dict[str, str], message: str = "commit") -> git.Commit:
    """Write files into the working tree and commit them."""
    root = Path(repo.working_tree_dir)
    for rel_path, content in files.items():
        target = root / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    repo.index.add([str(root / rel_path) for rel_path in files])
    return repo.index.commit(message, author=ACTOR, committer=ACTOR)


def set_ref(repo: git.Repo, ref: str, commit: git.Commit) -> None:
    repo.git.update_ref(ref, commit.hexsha)


@pytest.fixture
def git_repo(tmp_path):
    """
    Repository with remote-tracking branches and tags:

    refs/remotes/origin/main           README.md, x.txt, src/x.txt
    refs/remotes/origin/release        + v2/file.txt
    refs/tags/release/v2               + file.txt
    refs/remotes/origin/feature/login  + app/main.py
    refs/remotes/upstream/main         same as origin/main
    refs/tags/v1.0 (annotated)         same as origin/main
    """
    repo = git.Repo.init(tmp_path / "repo")
    with repo.config_writer() as writer:
        writer.set_value("user", "name", ACTOR.name)
        writer.set_value("user", "email", ACTOR.email)

    base = commit_files(repo, {"README.md": "hello\n", "x.txt": "top\n", "src/x.txt": "x\n"}, "base")
    set_ref(repo, "refs/remotes/origin/main", base)
    set_ref(repo, "refs/remotes/upstream/main", base)
    repo.create_tag("v1.0", ref=base, message="release 1.0")

    release = commit_files(repo, {"v2/file.txt": "release\n"}, "release")
    set_ref(repo, "refs/remotes/origin/release", release)

    release_v2 = commit_files(repo, {"file.txt": "v2\n"}, "release v2")
    set_ref(repo, "refs/tags/release/v2", release_v2)

    login = commit_files(repo, {"app/main.py": "print('login')\n"}, "login")
    set_ref(repo, "refs/remotes/origin/feature/login", login)

    yield SimpleNamespace(
        repo=repo,
        path=repo.working_tree_dir,
        base=base,
        release=release,
        release_v2=release_v2,
        login=login,
    )
    repo.close()
