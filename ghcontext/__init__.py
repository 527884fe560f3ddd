"""ghcontext - resolve GitHub URLs and browser titles to repository blobs."""

__version__ = "1.0.0"
