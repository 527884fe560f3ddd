"""
ghcontext - Core Data Structures (Pydantic Schemas)

Defines the value objects passed between the extractor and the resolver:
- LinkType: What kind of GitHub page a URL pointed at
- GitHubContext: Everything extracted from a URL or a browser window title
- ResolvedBlob: (commitish, path, commit_sha) produced by blob resolution
"""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


DEFAULT_HOST = "github.com"


# =============================================================================
# ENUMS
# =============================================================================


class LinkType(str, Enum):
    """Kind of object a GitHub link refers to."""

    UNKNOWN = "unknown"
    BLOB = "blob"


# =============================================================================
# CONTEXT
# =============================================================================


class GitHubContext(BaseModel):
    """
    A GitHub location extracted from a URL or window title.

    `treeish_path` is the unresolved "<commit-ish>/<directory>" prefix of a
    file reference. Because branch names may contain "/", the boundary
    between the two halves is only known after resolving against a real
    repository (see modules.resolver).
    """

    model_config = ConfigDict(frozen=True)

    host: Optional[str] = None
    owner: Optional[str] = None
    repository_name: Optional[str] = None
    branch_name: Optional[str] = None
    treeish_path: Optional[str] = None
    blob_name: Optional[str] = None
    pull_request: Optional[int] = Field(default=None, ge=0)
    issue: Optional[int] = Field(default=None, ge=0)
    line: Optional[int] = Field(default=None, ge=1)
    line_end: Optional[int] = Field(default=None, ge=1)
    link_type: LinkType = LinkType.UNKNOWN
    url: Optional[str] = None

    @model_validator(mode="after")
    def _check_invariants(self) -> "GitHubContext":
        if (self.owner is None) != (self.repository_name is None):
            raise ValueError("owner and repository_name must be set together")
        if self.line_end is not None:
            if self.line is None:
                raise ValueError("line_end requires line")
            if self.line_end < self.line:
                raise ValueError("line_end must not be less than line")
        return self

    @property
    def is_blob(self) -> bool:
        return self.treeish_path is not None and self.blob_name is not None

    @property
    def is_tree(self) -> bool:
        """A treeish path without a blob name refers to a directory."""
        return self.treeish_path is not None and self.blob_name is None

    @property
    def repository_url(self) -> Optional[str]:
        if self.owner is None:
            return None
        return f"https://{self.host or DEFAULT_HOST}/{self.owner}/{self.repository_name}"

    def selection_range(self) -> Optional[Tuple[int, int]]:
        """Return the 1-based inclusive (line, line_end) to select, if any."""
        if self.line is None:
            return None
        return self.line, self.line_end if self.line_end is not None else self.line


# =============================================================================
# RESOLUTION RESULT
# =============================================================================


class ResolvedBlob(NamedTuple):
    """
    Result of resolving a context against a repository.

    path is None when the commit-ish resolved but the blob doesn't exist at
    that revision. All three are None when nothing resolved.
    """

    commitish: Optional[str]
    path: Optional[str]
    commit_sha: Optional[str]

    @classmethod
    def empty(cls) -> "ResolvedBlob":
        return cls(None, None, None)

    @property
    def resolved(self) -> bool:
        return self.path is not None
