"""
=============================================================================
REQUEST HANDLERS
=============================================================================

    static.py   Resolve request paths to files and guard the allowlist

=============================================================================
"""

from .static import StaticFileHandler, ResolvedResource, AccessDenied

__all__ = [
    "StaticFileHandler",
    "ResolvedResource",
    "AccessDenied",
]
