"""Known cache locations for cachesweep."""

import platform
from typing import Iterable

from cachesweep.models import CacheTarget, ScanResult
from cachesweep.scanner import expand_path


def _target(id: str, path: str, name: str, description: str, is_critical: bool = False) -> CacheTarget:
    return CacheTarget(
        id=id,
        path=str(expand_path(path)),
        name=name,
        description=description,
        is_critical=is_critical,
    )


def _macos_locations() -> list[CacheTarget]:
    return [
        # =====================================================================
        # USER-LEVEL CACHES
        # =====================================================================
        _target(
            "core_device",
            "~/Library/Containers/com.apple.CoreDevice.CoreDeviceService/Data/Library/Caches/AppInstallationBinaryDeltas",
            "Core Device Service",
            "Caches for CoreDevice service, used for managing device connections "
            "and app installations (mainly for development).",
        ),
        _target(
            "wallpaper_agent",
            "~/Library/Containers/com.apple.wallpaper.agent/Data/Library/Caches",
            "Wallpaper Agent",
            "Wallpaper image cache and related data used by macOS wallpaper services.",
        ),
        _target(
            "user_caches",
            "~/Library/Caches",
            "User Caches",
            "General cache directory for user applications and system agents.",
        ),
        # =====================================================================
        # SYSTEM-LEVEL CACHES
        # =====================================================================
        _target(
            "system_caches",
            "/Library/Caches",
            "System Caches",
            "Global cache directory used by system daemons and applications.",
        ),
        _target(
            "http_storages",
            "/Library/HTTPStorages",
            "HTTP Storages",
            "Caches for HTTP requests, cookies, and URL session data used by "
            "system services and apps.",
        ),
        _target(
            "idle_assets",
            "/Library/Application Support/com.apple.idleassetsd",
            "Idle Assets",
            "Caches used by the IdleAssets daemon for preloaded background assets.",
        ),
        # =====================================================================
        # LOGS AND DIAGNOSTICS
        # =====================================================================
        _target(
            "system_logs",
            "/Library/Logs",
            "System Logs",
            "System and application log files for all users.",
            is_critical=True,
        ),
        _target(
            "logging_preferences",
            "/Library/Preferences/Logging",
            "Logging Preferences",
            "System logging configuration and preference data.",
            is_critical=True,
        ),
        _target(
            "core_logs",
            "/private/var/log",
            "Core System Logs",
            "Primary system log directory containing kernel, install, and diagnostic logs.",
            is_critical=True,
        ),
        _target(
            "diagnostics",
            "/private/var/db/diagnostics",
            "Diagnostics Reports",
            "Diagnostic and analytics reports collected by macOS.",
            is_critical=True,
        ),
        _target(
            "power_logs",
            "/private/var/db/powerlog",
            "Power Logs",
            "Logs related to power management and battery usage.",
        ),
        # =====================================================================
        # TEMPORARY DATA
        # =====================================================================
        _target(
            "temporary_files",
            "/private/var/tmp",
            "Temporary Files",
            "Temporary storage used by system and apps; cleared periodically.",
        ),
        _target(
            "system_library_caches",
            "/System/Library/Caches",
            "System Library Caches",
            "Caches used by macOS system components; should not be modified manually.",
            is_critical=True,
        ),
    ]


def _generic_locations() -> list[CacheTarget]:
    return [
        _target(
            "user_caches",
            "~/.cache",
            "User Caches",
            "Per-user cache directory (XDG_CACHE_HOME) shared by desktop applications.",
        ),
    ]


def get_known_locations(extra_paths: Iterable[str] = ()) -> list[CacheTarget]:
    """
    Build a fresh catalog of cache locations for this platform.

    Args:
        extra_paths: User-configured directories appended as ``extra_N`` targets

    Returns:
        New CacheTarget list with every size at 0
    """
    if platform.system() == "Darwin":
        targets = _macos_locations()
    else:
        targets = _generic_locations()

    for i, path in enumerate(extra_paths, 1):
        targets.append(
            _target(f"extra_{i}", path, f"Custom Location {i}", "User-configured cache directory.")
        )
    return targets


def find_target(targets: list[CacheTarget], key: str) -> CacheTarget | None:
    """Look a target up by id or by path."""
    expanded = str(expand_path(key))
    for target in targets:
        if target.id == key or target.path == expanded:
            return target
    return None


def apply_scan(targets: list[CacheTarget], result: ScanResult) -> None:
    """Store the measured size on every target present in *result*."""
    for target in targets:
        if target.path in result:
            target.size = result[target.path]


def total_size(targets: list[CacheTarget]) -> int:
    """Sum of the last measured sizes."""
    return sum(t.size for t in targets)
