"""
ghcontext - IDE Integration Boundary

The host (an IDE extension) supplies the clipboard, window titles, document
views and, when it has one, an annotate/blame view. These are ports so the
core can be driven by fakes in tests and by the real host in production.

GitHubContextService ties the ports to the extractor, resolver and change
detector.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Optional, Protocol

from loguru import logger

from .changes import has_changes_in_working_directory
from .config import ContextConfig
from .extractor import find_context_from_titles, find_context_from_url, find_context_from_window_title
from .repository import GitRepositoryProvider, RepositoryProvider
from .resolver import resolve_blob
from .schemas import GitHubContext, ResolvedBlob


# =============================================================================
# PORTS
# =============================================================================


class ClipboardSource(Protocol):
    def get_text(self) -> Optional[str]: ...


class WindowEnumerator(Protocol):
    def window_titles(self, window_class: str) -> Iterable[str]:
        """Titles of all top-level windows of window_class, in a stable order."""
        ...


class DocumentSink(Protocol):
    def open_document(self, path: str) -> Any: ...

    def active_view(self) -> Any: ...

    def select_lines(self, view: Any, line: int, line_end: int) -> None:
        """Select 1-based lines line..line_end (inclusive) in view."""
        ...


class AnnotationCapability(Protocol):
    def annotate_file(self, repository_dir: str, branch_name: str, relative_path: str, version_sha: str) -> None: ...


# =============================================================================
# CAPABILITY NEGOTIATION
# =============================================================================


class CapabilityStatus(str, Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class AnnotationProbe:
    status: CapabilityStatus
    capability: Optional[AnnotationCapability] = None

    @property
    def available(self) -> bool:
        return self.status is CapabilityStatus.AVAILABLE


def negotiate_annotation(candidate: Optional[Any]) -> AnnotationProbe:
    """Decide once whether the host offers an annotate view."""
    if candidate is None or not callable(getattr(candidate, "annotate_file", None)):
        return AnnotationProbe(CapabilityStatus.UNAVAILABLE)
    return AnnotationProbe(CapabilityStatus.AVAILABLE, candidate)


# =============================================================================
# SERVICE
# =============================================================================


class GitHubContextService:
    """
    Finds GitHub contexts from the host and navigates to them.

    Usage:
        service = GitHubContextService(clipboard=host.clipboard, document_sink=host.documents)
        context = service.find_context_from_clipboard()
        if context and service.try_open_file(repo_dir, context):
            ...
    """

    def __init__(
        self,
        repository_provider: Optional[RepositoryProvider] = None,
        clipboard: Optional[ClipboardSource] = None,
        window_enumerator: Optional[WindowEnumerator] = None,
        document_sink: Optional[DocumentSink] = None,
        annotation: Optional[AnnotationCapability] = None,
        config: Optional[ContextConfig] = None,
    ):
        self.repository_provider = repository_provider or GitRepositoryProvider()
        self.clipboard = clipboard
        self.window_enumerator = window_enumerator
        self.document_sink = document_sink
        self.config = config or ContextConfig()
        self.annotation = negotiate_annotation(annotation)

        if not self.annotation.available:
            logger.debug("Annotate view unavailable")

    def find_context_from_clipboard(self) -> Optional[GitHubContext]:
        """Find the context from a URL in the clipboard, if any."""
        if self.clipboard is None:
            return None
        return find_context_from_url(self.clipboard.get_text())

    def find_context_from_url(self, url: Optional[str]) -> Optional[GitHubContext]:
        return find_context_from_url(url)

    def find_context_from_window_title(self, window_title: Optional[str]) -> Optional[GitHubContext]:
        return find_context_from_window_title(window_title)

    def find_context_from_browser(self) -> Optional[GitHubContext]:
        """Find the context from the first browser window with a GitHub title."""
        if self.window_enumerator is None:
            logger.debug("No window enumerator configured")
            return None
        return find_context_from_titles(self._browser_window_titles())

    def _browser_window_titles(self) -> Iterable[str]:
        for window_class in self.config.browser.window_classes:
            for title in self.window_enumerator.window_titles(window_class):
                if title:
                    yield title

    def to_repository_url(self, context: GitHubContext) -> Optional[str]:
        return context.repository_url

    def resolve_blob(
        self,
        repository_dir: str,
        context: GitHubContext,
        remote_name: Optional[str] = None,
    ) -> ResolvedBlob:
        return resolve_blob(
            self.repository_provider,
            repository_dir,
            context,
            remote_name=remote_name or self.config.resolver.remote_name,
        )

    def has_changes_in_working_directory(self, repository_dir: str, commitish: str, path: str) -> bool:
        return has_changes_in_working_directory(self.repository_provider, repository_dir, commitish, path)

    def try_open_file(self, repository_dir: str, context: GitHubContext) -> bool:
        """
        Open the working directory file for a context and select its lines.

        Returns:
            True if the file was opened
        """
        resolved = self.resolve_blob(repository_dir, context)
        if resolved.path is None:
            return False

        if self.document_sink is None:
            logger.warning("No document sink configured; can't open file")
            return False

        full_path = Path(repository_dir) / resolved.path
        view = self.document_sink.open_document(str(full_path))
        self._set_selection(view, context)
        return True

    async def try_annotate_file(self, repository_dir: str, current_branch: str, context: GitHubContext) -> bool:
        """
        Open the host's annotate (blame) view for a context.

        current_branch must exist in the repository but isn't shown by the
        host. Returns False when the annotate view isn't available.
        """
        resolved = self.resolve_blob(repository_dir, context)
        if resolved.path is None:
            return False

        if not self.annotation.available:
            return False

        try:
            self.annotation.capability.annotate_file(
                repository_dir, current_branch, resolved.path, resolved.commit_sha
            )
        except Exception as e:
            logger.warning(f"Annotate view failed for {resolved.path}: {e}")
            return False

        if context.line is not None and self.document_sink is not None:
            # The annotate view opens asynchronously in the host
            await asyncio.sleep(self.config.annotate.selection_delay_seconds)
            self._set_selection(self.document_sink.active_view(), context)

        return True

    def _set_selection(self, view: Any, context: GitHubContext) -> None:
        selection = context.selection_range()
        if selection is None or view is None:
            return
        line, line_end = selection
        self.document_sink.select_lines(view, line, line_end)
