from __future__ import annotations

from advisor.utils.filetrace import traced_open

__all__ = [
    "traced_open",
]
