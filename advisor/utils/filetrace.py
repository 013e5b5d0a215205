"""
Optional file-access tracer for the static table loaders.

Enable with: ADVISOR_TRACE_FILES=1

Each traced access is logged at INFO on the "advisor.utils.filetrace" logger.
When disabled (default), wrappers delegate straight to the builtins.
"""
from __future__ import annotations

import logging
from pathlib import Path

from advisor.config import CONFIG

logger = logging.getLogger(__name__)

_ENABLED = CONFIG.trace_files


def _log(operation: str, path: str | Path, extra: str = "") -> None:
    if not _ENABLED:
        return
    logger.info("[filetrace] %s %s%s", operation, path, (" " + extra) if extra else "")


def traced_open(path: str | Path, mode: str = "r", **kwargs):
    """Open a file; when ADVISOR_TRACE_FILES=1, log the access. When disabled, same as builtin open."""
    p = Path(path) if not isinstance(path, Path) else path
    _log("open", p, mode)
    return open(p, mode, **kwargs)
