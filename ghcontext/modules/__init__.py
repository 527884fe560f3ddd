# ghcontext Modules
# Version: 1.0

# Context model
from .schemas import GitHubContext, LinkType, ResolvedBlob

# Pattern extraction
from .uri import RepositoryUri
from .extractor import (
    find_context_from_titles,
    find_context_from_url,
    find_context_from_window_title,
)

# Repository access and resolution
from .repository import GitRepository, GitRepositoryProvider, RepositoryHandle, RepositoryProvider
from .resolver import DEFAULT_REMOTE_NAME, ResolverContractError, iter_objectish, resolve_blob
from .changes import has_changes_in_working_directory

# Configuration
from .config import ConfigError, ContextConfig, load_config

# IDE integration
from .integration import (
    AnnotationCapability,
    AnnotationProbe,
    CapabilityStatus,
    ClipboardSource,
    DocumentSink,
    GitHubContextService,
    WindowEnumerator,
    negotiate_annotation,
)

__all__ = [
    # Schemas
    "GitHubContext",
    "LinkType",
    "ResolvedBlob",
    # Extraction
    "RepositoryUri",
    "find_context_from_titles",
    "find_context_from_url",
    "find_context_from_window_title",
    # Repository
    "GitRepository",
    "GitRepositoryProvider",
    "RepositoryHandle",
    "RepositoryProvider",
    # Resolver
    "DEFAULT_REMOTE_NAME",
    "ResolverContractError",
    "iter_objectish",
    "resolve_blob",
    "has_changes_in_working_directory",
    # Config
    "ConfigError",
    "ContextConfig",
    "load_config",
    # Integration
    "AnnotationCapability",
    "AnnotationProbe",
    "CapabilityStatus",
    "ClipboardSource",
    "DocumentSink",
    "GitHubContextService",
    "WindowEnumerator",
    "negotiate_annotation",
]
