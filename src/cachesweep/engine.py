"""Scanning and cleaning orchestration for cachesweep."""

from __future__ import annotations

import logging
import os
import shlex
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Iterable, Sequence

from cachesweep.errors import CacheError, PathNotFound, PathUnreadable
from cachesweep.models import CleanOutcome, MeasureStatus, PathMeasurement, ScanResult
from cachesweep.privileges import (
    ElevatedExecutor,
    Executor,
    ShellExecutor,
    default_elevated_executor,
)
from cachesweep.scanner import SizeProbe

log = logging.getLogger(__name__)

# System-wide locations that need administrator rights to modify
PROTECTED_PREFIXES = ("/Library", "/private/var")

DEFAULT_MAX_WORKERS = 8

ProgressCallback = Callable[[str, int, int], None]  # (path, current, total)


def removal_command(path: str) -> str:
    """Shell command that empties *path* but keeps the directory itself.

    The three globs cover regular and hidden children. Unmatched globs stay
    literal and ``rm -f`` ignores them, so an empty directory succeeds.
    """
    quoted = shlex.quote(path.rstrip("/") or "/")
    return f"rm -rf -- {quoted}/* {quoted}/.[!.]* {quoted}/..?*"


class CacheEngine:
    """Measures and empties cache directories, isolating failures per path."""

    def __init__(
        self,
        probe: SizeProbe | None = None,
        executor: Executor | None = None,
        elevated_executor: ElevatedExecutor | None = None,
        protected_prefixes: Iterable[str] = PROTECTED_PREFIXES,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.probe = probe or SizeProbe()
        self.executor = executor or ShellExecutor()
        self.elevated_executor = elevated_executor or default_elevated_executor()
        self.protected_prefixes = tuple(p.rstrip("/") for p in protected_prefixes)
        self.max_workers = max_workers

    # -- classification ---------------------------------------------------

    def requires_elevated_privileges(self, path: str) -> bool:
        """Whether *path* lies under a protected system prefix.

        Based on the path alone; actual permissions are not checked.
        """
        return any(
            path == prefix or path.startswith(prefix + "/") for prefix in self.protected_prefixes
        )

    def path_exists(self, path: str) -> bool:
        return os.path.exists(path)

    # -- measurement ------------------------------------------------------

    def measure(self, path: str) -> int:
        """Measure a single path. Errors propagate."""
        return self.probe.measure(path)

    def _measure_for_scan(self, path: str) -> PathMeasurement:
        try:
            size = self.probe.measure(path)
        except CacheError as e:
            log.debug("Could not measure %s: %s", path, e)
            return PathMeasurement(
                path=path, size_bytes=0, status=MeasureStatus.UNREADABLE, error=str(e)
            )

        if size == 0 and not os.path.lexists(path):
            return PathMeasurement(path=path, size_bytes=0, status=MeasureStatus.MISSING)
        return PathMeasurement(path=path, size_bytes=size, status=MeasureStatus.MEASURED)

    def scan(
        self,
        paths: Iterable[str],
        progress_callback: ProgressCallback | None = None,
    ) -> ScanResult:
        """
        Measure every path concurrently.

        Each path is measured on its own worker; any failure degrades to a
        size of 0 for that path only. Returns after every measurement has
        finished.

        Args:
            paths: Paths to measure (duplicates are collapsed)
            progress_callback: Optional callback(path, current, total)

        Returns:
            ScanResult with exactly one entry per distinct path
        """
        unique = list(dict.fromkeys(paths))
        measurements: dict[str, PathMeasurement] = {}
        if not unique:
            return ScanResult()

        total = len(unique)
        workers = min(self.max_workers, total)
        with ThreadPoolExecutor(max_workers=workers) as pool:
            future_to_path = {pool.submit(self._measure_for_scan, p): p for p in unique}

            for i, future in enumerate(as_completed(future_to_path)):
                path = future_to_path[future]
                try:
                    measurements[path] = future.result()
                except Exception as e:
                    log.exception("Unexpected failure while measuring %s", path)
                    measurements[path] = PathMeasurement(
                        path=path, size_bytes=0, status=MeasureStatus.UNREADABLE, error=str(e)
                    )

                if progress_callback:
                    progress_callback(path, i + 1, total)

        # Report in input order
        return ScanResult(measurements={p: measurements[p] for p in unique})

    # -- deletion ---------------------------------------------------------

    def delete_contents(self, path: str) -> int:
        """
        Delete everything inside a directory, keeping the directory.

        Args:
            path: Directory to empty

        Returns:
            Size in bytes measured just before deletion, 0 when the
            directory could not be listed

        Raises:
            PathNotFound: If the path does not exist
            CommandFailed: If removal failed or authentication was refused
        """
        if not self.path_exists(path):
            raise PathNotFound(path)

        elevated = self.requires_elevated_privileges(path)
        try:
            size_before = self.probe.measure(path)
        except PathUnreadable as e:
            # Removal still runs; an unlistable directory reports 0 freed
            log.debug("Could not measure %s before deletion: %s", path, e)
            size_before = 0

        command = removal_command(path)
        if elevated:
            self.elevated_executor.run(command)
        else:
            self.executor.run(command)

        log.info("Emptied %s (%d bytes)", path, size_before)
        return size_before

    def clean(
        self,
        paths: Sequence[str],
        progress_callback: ProgressCallback | None = None,
    ) -> CleanOutcome:
        """
        Empty each path in order, one at a time.

        A failure on one path is recorded and the next path is processed.

        Args:
            paths: Directories to empty, in order (duplicates are collapsed)
            progress_callback: Optional callback(path, current, total)

        Returns:
            CleanOutcome with total bytes freed and per-path errors
        """
        unique = list(dict.fromkeys(paths))
        freed: dict[str, int] = {}
        errors: dict[str, Exception] = {}

        for i, path in enumerate(unique):
            if progress_callback:
                progress_callback(path, i + 1, len(unique))

            try:
                freed[path] = self.delete_contents(path)
            except CacheError as e:
                log.warning("Failed to clean %s: %s", path, e)
                errors[path] = e
            except Exception as e:
                log.exception("Unexpected failure while cleaning %s", path)
                errors[path] = e

        return CleanOutcome(total_freed=sum(freed.values()), freed=freed, errors=errors)
