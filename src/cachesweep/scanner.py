"""Directory size measurement for cachesweep."""

import logging
import os
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

from cachesweep.errors import CacheError, CommandFailed, InvalidOutput, PathUnreadable

log = logging.getLogger(__name__)


def expand_path(path: str) -> Path:
    """Expand ~ and environment variables in path."""
    return Path(os.path.expanduser(os.path.expandvars(path)))


class SizeStrategy(ABC):
    """One way of computing the size of a directory tree."""

    name = "strategy"

    @abstractmethod
    def measure(self, path: str) -> int:
        """Return the size of *path* in bytes.

        Raises:
            CacheError: If this strategy cannot produce a size.
        """


class DuStrategy(SizeStrategy):
    """Fast path: ask ``du -sk`` for the size in kilobytes."""

    name = "du"

    def __init__(self, du_command: str = "du"):
        self.du_command = du_command

    def measure(self, path: str) -> int:
        try:
            result = subprocess.run(
                [self.du_command, "-sk", path],
                capture_output=True,
                text=True,
            )
        except OSError as e:
            raise CommandFailed(str(e)) from e

        if result.returncode != 0:
            raise CommandFailed(result.stderr or result.stdout)

        # Output looks like "1234\t/path/to/dir"
        fields = result.stdout.split()
        try:
            kilobytes = int(fields[0])
        except (IndexError, ValueError):
            raise InvalidOutput(result.stdout)

        if kilobytes < 0:
            raise InvalidOutput(result.stdout)
        return kilobytes * 1024


class WalkStrategy(SizeStrategy):
    """Fallback: walk the tree with os.scandir and sum entry sizes.

    Symlinks are counted by their own size and never followed. Directories
    that cannot be opened below the root, and entries whose attributes
    cannot be read, contribute nothing.
    """

    name = "walk"

    def measure(self, path: str) -> int:
        root = Path(path)
        if not os.path.lexists(root):
            return 0

        if not root.is_dir() or root.is_symlink():
            try:
                return root.lstat().st_size
            except OSError:
                return 0

        try:
            entries = os.scandir(root)
        except OSError as e:
            raise PathUnreadable(path, e.strerror or str(e)) from e

        with entries:
            return self._sum_entries(entries)

    def _sum_entries(self, entries) -> int:
        total = 0
        for entry in entries:
            try:
                if entry.is_dir(follow_symlinks=False):
                    total += self._sum_directory(entry.path)
                elif entry.is_file(follow_symlinks=False) or entry.is_symlink():
                    total += entry.stat(follow_symlinks=False).st_size
            except OSError:
                continue
        return total

    def _sum_directory(self, path: str) -> int:
        try:
            with os.scandir(path) as entries:
                return self._sum_entries(entries)
        except OSError:
            return 0


class SizeProbe:
    """Measures directory trees with a chain of strategies.

    Each strategy is tried in order. A failure of any strategy but the last
    is logged and the next one is tried; the last strategy's error
    propagates to the caller.
    """

    def __init__(self, strategies: list[SizeStrategy] | None = None, use_fast_path: bool = True):
        if strategies is None:
            strategies = [DuStrategy(), WalkStrategy()] if use_fast_path else [WalkStrategy()]
        if not strategies:
            raise ValueError("SizeProbe needs at least one strategy")
        self.strategies = strategies

    def measure(self, path: str) -> int:
        """
        Calculate the total size of a directory tree.

        Args:
            path: Directory to measure

        Returns:
            Size in bytes, never negative

        Raises:
            CacheError: If the last strategy in the chain fails
                (``PathUnreadable`` for the default chain)
        """
        *fallible, last = self.strategies

        for strategy in fallible:
            try:
                return max(strategy.measure(path), 0)
            except CacheError as e:
                log.debug("%s could not measure %s, falling back: %s", strategy.name, path, e)

        return max(last.measure(path), 0)
