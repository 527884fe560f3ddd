"""
ghcontext - Pattern Extractor

Turns semi-structured text into a GitHubContext:
- GitHub URLs (repository root, blob links with #L line fragments, pull requests)
- Browser window titles for the GitHub page types (blob, tree, repository,
  branch, branch list, pull request, issue)

Nothing here raises on malformed input. No match is returned as None.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Iterable, Optional, Tuple

from loguru import logger

from .schemas import GitHubContext, LinkType
from .uri import OWNER_PATTERN, REPO_PATTERN, RepositoryUri


# =============================================================================
# PATTERN FRAGMENTS
# =============================================================================

OWNER = f"(?P<owner>{OWNER_PATTERN})"
REPO = f"(?P<repo>{REPO_PATTERN})"

# Repository name shown as the page heading; the owner/repo pair after "·"
# is the one reported.
TITLE_REPO = f"(?P<title_repo>{REPO_PATTERN})"

# Ref name segments can't start with "." or contain space, ~ ^ : ? * [ or \
_BRANCH_SEGMENT = r"[^./ ~^:?*\[\\][^/ ~^:?*\[\\]*"
BRANCH = f"(?P<branch>{_BRANCH_SEGMENT}(?:/{_BRANCH_SEGMENT})*)"

PULL = "(?P<pull>[0-9]+)"
ISSUE = "(?P<issue>[0-9]+)"

TREE = f"^{TITLE_REPO}/(?P<tree>[^ ]+)"
BLOB_NAME = f"^{TITLE_REPO}/(?P<blob_name>[^ /]+)"

# Optional " · GitHub" decoration before the browser's " - <app name>" suffix
SUFFIX = "(?: · GitHub)? - "


# =============================================================================
# WINDOW TITLE PATTERNS
# =============================================================================

WINDOW_TITLE_BLOB_RE = re.compile(f"{BLOB_NAME} at {BRANCH} · {OWNER}/{REPO}{SUFFIX}")
WINDOW_TITLE_TREE_RE = re.compile(f"{TREE} at {BRANCH} · {OWNER}/{REPO}{SUFFIX}")
WINDOW_TITLE_REPOSITORY_RE = re.compile(f"^(?:GitHub - )?{OWNER}/{REPO}(?:: .*)? - ")
WINDOW_TITLE_BRANCH_RE = re.compile(f"^(?:GitHub - )?{OWNER}/{REPO} at {BRANCH} ")
WINDOW_TITLE_BRANCHES_RE = re.compile(f"Branches · {OWNER}/{REPO}{SUFFIX}")
WINDOW_TITLE_PULL_REQUEST_RE = re.compile(f" · Pull Request #{PULL} · {OWNER}/{REPO}{SUFFIX}")
WINDOW_TITLE_ISSUE_RE = re.compile(f" · Issue #{ISSUE} · {OWNER}/{REPO}{SUFFIX}")


# =============================================================================
# URL PATTERNS
# =============================================================================

URL_LINE_RE = re.compile(r"#L(?P<line>[0-9]+)(?:-L(?P<line_end>[0-9]+))?$")
URL_BLOB_RE = re.compile(r"blob/(?P<treeish>[^/]+(?:/[^/]+)*)/(?P<blob_name>[^/#?]+)")


# =============================================================================
# URL PIPELINE
# =============================================================================


def find_context_from_url(url: Optional[str]) -> Optional[GitHubContext]:
    """
    Convert a GitHub URL to a context.

    Args:
        url: Any string; typically clipboard text

    Returns:
        GitHubContext, or None if url isn't an http(s) repository URL
    """
    uri = RepositoryUri.parse(url)
    if uri is None:
        logger.debug(f"Not a repository URL: {url!r}")
        return None

    fields: Dict[str, Any] = {
        "host": uri.host,
        "owner": uri.owner,
        "repository_name": uri.repository_name,
        "url": uri.url,
    }

    subpath = uri.sub_path
    if subpath is None:
        return GitHubContext(**fields)

    fields["line"], fields["line_end"] = _find_line(subpath)
    fields["pull_request"] = _find_pull_request(uri)

    match = URL_BLOB_RE.search(subpath)
    if match:
        fields["treeish_path"] = match.group("treeish")
        fields["blob_name"] = match.group("blob_name")
        fields["link_type"] = LinkType.BLOB

    return GitHubContext(**fields)


def _find_line(subpath: str) -> Tuple[Optional[int], Optional[int]]:
    match = URL_LINE_RE.search(subpath)
    if not match:
        return None, None

    line = int(match.group("line"))
    if line == 0:
        return None, None
    if match.group("line_end") is None:
        return line, None

    line_end = int(match.group("line_end"))
    if line_end == 0:
        return line, None
    if line_end < line:
        line, line_end = line_end, line
    return line, line_end


def _find_pull_request(uri: RepositoryUri) -> Optional[int]:
    subpath = uri.sub_path_after("pull/")
    if subpath is None:
        return None

    number = re.split(r"[/?#]", subpath, maxsplit=1)[0]
    if not number.isascii() or not number.isdigit():
        return None
    return int(number)


# =============================================================================
# WINDOW TITLE PIPELINE
# =============================================================================


def find_context_from_window_title(window_title: Optional[str]) -> Optional[GitHubContext]:
    """
    Find a context from a browser window title.

    Patterns are tried in a fixed order and the first match wins. Blob titles
    are checked before tree titles because a single-segment tree title is
    indistinguishable from a blob title.
    """
    if not window_title:
        return None

    match = WINDOW_TITLE_BLOB_RE.search(window_title)
    if match:
        return GitHubContext(
            owner=match.group("owner"),
            repository_name=match.group("repo"),
            branch_name=match.group("branch"),
            blob_name=match.group("blob_name"),
        )

    match = WINDOW_TITLE_TREE_RE.search(window_title)
    if match:
        return GitHubContext(
            owner=match.group("owner"),
            repository_name=match.group("repo"),
            branch_name=match.group("branch"),
            treeish_path=f"{match.group('branch')}/{match.group('tree')}",
        )

    match = WINDOW_TITLE_REPOSITORY_RE.search(window_title)
    if match:
        return GitHubContext(owner=match.group("owner"), repository_name=match.group("repo"))

    match = WINDOW_TITLE_BRANCH_RE.search(window_title)
    if match:
        return GitHubContext(
            owner=match.group("owner"),
            repository_name=match.group("repo"),
            branch_name=match.group("branch"),
        )

    match = WINDOW_TITLE_BRANCHES_RE.search(window_title)
    if match:
        return GitHubContext(owner=match.group("owner"), repository_name=match.group("repo"))

    match = WINDOW_TITLE_PULL_REQUEST_RE.search(window_title)
    if match:
        return GitHubContext(
            owner=match.group("owner"),
            repository_name=match.group("repo"),
            pull_request=int(match.group("pull")),
        )

    match = WINDOW_TITLE_ISSUE_RE.search(window_title)
    if match:
        return GitHubContext(
            owner=match.group("owner"),
            repository_name=match.group("repo"),
            issue=int(match.group("issue")),
        )

    return None


def find_context_from_titles(window_titles: Iterable[str]) -> Optional[GitHubContext]:
    """Return the context for the first title that matches, in iteration order."""
    for window_title in window_titles:
        context = find_context_from_window_title(window_title)
        if context is not None:
            logger.debug(f"Matched window title: {window_title!r}")
            return context
    return None
