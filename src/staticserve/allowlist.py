"""
=============================================================================
DIRECTORY ALLOWLIST
=============================================================================

Builds the set of directories that files may be served from.

The operator names a few permitted root directories at startup. Every
directory below them, at any depth, is allowed as well:

    permitted: /srv/site

    /srv/site              ✓ allowed
    /srv/site/css          ✓ allowed
    /srv/site/img/icons    ✓ allowed
    /srv                   ✗ not allowed
    /etc                   ✗ not allowed

The scan happens ONCE, before the server starts listening. The resulting
frozenset is shared read-only by every worker thread, so it needs no lock.
Directories created after startup are not servable until a restart.

=============================================================================
SYMBOLIC LINKS
=============================================================================

os.walk() does not descend into symlinked directories (followlinks=False).
That keeps a link pointing back up the tree from recursing forever. Files
reached through such a link are still guarded correctly, because the
resolver canonicalizes request paths to their real location before
comparing them against this set.

=============================================================================
"""

import os
import logging
from pathlib import Path
from typing import FrozenSet, Iterable


logger = logging.getLogger(__name__)


def _raise(error: OSError):
    # os.walk() silently skips unreadable directories unless told otherwise
    raise error


def scan_allowed_directories(roots: Iterable[str]) -> FrozenSet[str]:
    """
    Recursively expand permitted roots into the Allowed Directory Set.

    Args:
        roots: Permitted root directories.

    Returns:
        Canonical absolute paths of every root and every nested directory.

    Raises:
        OSError: If a root is missing or any directory cannot be listed.
                 A partial allowlist is never returned.
    """
    allowed = set()

    for root in roots:
        canonical = Path(root).resolve()
        if not canonical.is_dir():
            raise NotADirectoryError(f"Permitted directory does not exist: {root}")

        for dirpath, _dirnames, _filenames in os.walk(canonical, onerror=_raise):
            allowed.add(dirpath)

        logger.debug(f"Scanned permitted directory {canonical}")

    return frozenset(allowed)
