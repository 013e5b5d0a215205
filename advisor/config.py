"""App configuration (env-only).

Values are read once at import time, after .env is loaded. Engine constants
(specific output, reference output, band thresholds) live with the rules and
are not configurable: identical requests must always yield identical results.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

_PACKAGE_DATA_DIR = Path(__file__).resolve().parent / "data"


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class AppConfig:
    # Logging level applied by the CLI (library code never configures handlers)
    log_level: str = (os.getenv("ADVISOR_LOG_LEVEL") or "WARNING").strip().upper()

    # Optional override for the directory holding materials/ and defects/ tables
    data_dir: str = (os.getenv("ADVISOR_DATA_DIR") or "").strip()

    # File access tracing for table loads
    trace_files: bool = os.getenv("ADVISOR_TRACE_FILES", "0").strip() == "1"

    # CLI JSON output
    json_indent: int = _env_int("ADVISOR_JSON_INDENT", 2)

    def resolved_data_dir(self) -> Path:
        """Directory containing materials/ and defects/ JSON tables."""
        if self.data_dir:
            return Path(self.data_dir).expanduser().resolve()
        return _PACKAGE_DATA_DIR


CONFIG = AppConfig()
