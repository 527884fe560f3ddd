"""
Test doubles for the repository and IDE ports.

FakeRepository records every lookup so tests can assert which refs were
probed, and in what order.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set


@dataclass
class FakeCommit:
    hexsha: str
    paths: Set[str] = field(default_factory=set)


class FakeRepository:
    def __init__(self, refs: Optional[Dict[str, FakeCommit]] = None, commits: Optional[List[FakeCommit]] = None):
        self.refs = dict(refs or {})
        self.commits = {c.hexsha: c for c in (commits or [])}
        for commit in self.refs.values():
            self.commits.setdefault(commit.hexsha, commit)
        self.lookups: List[str] = []
        self.entered = 0
        self.exited = 0

    def __enter__(self):
        self.entered += 1
        return self

    def __exit__(self, exc_type, exc, tb):
        self.exited += 1
        return None

    def _commit(self, rev: str) -> Optional[FakeCommit]:
        if rev in self.refs:
            return self.refs[rev]
        return self.commits.get(rev)

    def lookup(self, revision: str):
        self.lookups.append(revision)
        rev, sep, path = revision.partition(":")
        commit = self._commit(rev)
        if commit is None or not sep:
            return commit
        return path if path in commit.paths else None

    def lookup_commit(self, revision: str):
        self.lookups.append(revision)
        return self._commit(revision)

    def diff_to_working_directory(self, commit, paths):
        return []

    @property
    def probed_refs(self) -> List[str]:
        return [r for r in self.lookups if r.startswith("refs/") and ":" not in r]


class FakeRepositoryProvider:
    def __init__(self, repository: FakeRepository):
        self.repository = repository
        self.opened: List[str] = []

    def open(self, path: str) -> FakeRepository:
        self.opened.append(path)
        return self.repository


class FakeClipboard:
    def __init__(self, text: Optional[str]):
        self.text = text

    def get_text(self) -> Optional[str]:
        return self.text


class FakeWindowEnumerator:
    def __init__(self, titles_by_class: Dict[str, List[str]]):
        self.titles_by_class = titles_by_class
        self.requested: List[str] = []

    def window_titles(self, window_class: str):
        self.requested.append(window_class)
        return list(self.titles_by_class.get(window_class, []))


class FakeDocumentSink:
    def __init__(self):
        self.opened: List[str] = []
        self.selections: List[tuple] = []
        self.view = object()

    def open_document(self, path: str):
        self.opened.append(path)
        return self.view

    def active_view(self):
        return self.view

    def select_lines(self, view, line: int, line_end: int) -> None:
        self.selections.append((view, line, line_end))


class FakeAnnotation:
    def __init__(self, error: Optional[Exception] = None):
        self.calls: List[tuple] = []
        self.error = error

    def annotate_file(self, repository_dir: str, branch_name: str, relative_path: str, version_sha: str) -> None:
        self.calls.append((repository_dir, branch_name, relative_path, version_sha))
        if self.error is not None:
            raise self.error
