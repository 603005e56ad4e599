"""Settings file and freed-space counter for cachesweep."""

import json
import logging
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from cachesweep.engine import DEFAULT_MAX_WORKERS, PROTECTED_PREFIXES, CacheEngine
from cachesweep.scanner import SizeProbe, expand_path

log = logging.getLogger(__name__)

CONFIG_DIR = expand_path("~/.cachesweep")
CONFIG_FILE = CONFIG_DIR / "config.json"
STATS_FILE = CONFIG_DIR / "stats.json"


class Settings(BaseModel):
    """User settings."""

    max_workers: int = Field(DEFAULT_MAX_WORKERS, ge=1, description="Parallel scan workers")
    use_fast_path: bool = Field(True, description="Try `du` before walking the tree")
    protected_prefixes: list[str] = Field(
        default_factory=lambda: list(PROTECTED_PREFIXES),
        description="Path prefixes that need administrator rights to clean",
    )
    extra_paths: list[str] = Field(
        default_factory=list, description="Additional directories to treat as caches"
    )


class Stats(BaseModel):
    """Running total of space reclaimed by cleanups."""

    total_freed_bytes: int = Field(0, ge=0)
    clean_count: int = Field(0, ge=0)
    last_cleaned: Optional[datetime] = None


def _read_json(path) -> dict | None:
    if not path.exists():
        return None
    try:
        with open(path) as f:
            return json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        log.warning("Ignoring unreadable %s: %s", path, e)
        return None


def _write_json(path, data: str) -> bool:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            f.write(data)
        return True
    except OSError as e:
        log.warning("Could not write %s: %s", path, e)
        return False


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    data = _read_json(CONFIG_FILE)
    if data is None:
        return Settings()
    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        log.warning("Invalid settings in %s, using defaults: %s", CONFIG_FILE, e)
        return Settings()


def save_settings(settings: Settings) -> bool:
    """Save settings to disk."""
    return _write_json(CONFIG_FILE, settings.model_dump_json(indent=2))


def load_stats() -> Stats:
    data = _read_json(STATS_FILE)
    if data is None:
        return Stats()
    try:
        return Stats.model_validate(data)
    except ValidationError as e:
        log.warning("Resetting invalid stats in %s: %s", STATS_FILE, e)
        return Stats()


def record_freed(bytes_freed: int) -> Stats:
    """
    Add a cleanup to the persisted counter.

    Args:
        bytes_freed: Bytes reported freed by the cleanup

    Returns:
        Updated Stats
    """
    stats = load_stats()
    stats.total_freed_bytes += max(bytes_freed, 0)
    stats.clean_count += 1
    stats.last_cleaned = datetime.now()
    _write_json(STATS_FILE, stats.model_dump_json(indent=2))
    return stats


def build_engine(settings: Settings | None = None) -> CacheEngine:
    """Create a CacheEngine configured from *settings*."""
    settings = settings or load_settings()
    return CacheEngine(
        probe=SizeProbe(use_fast_path=settings.use_fast_path),
        protected_prefixes=settings.protected_prefixes,
        max_workers=settings.max_workers,
    )
