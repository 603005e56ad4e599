"""Shared test fixtures."""

from __future__ import annotations

import pytest

import cachesweep.config as config
from cachesweep.engine import CacheEngine
from cachesweep.errors import CommandFailed, PathUnreadable
from cachesweep.privileges import ElevatedExecutor, ShellExecutor
from cachesweep.scanner import SizeProbe, SizeStrategy, WalkStrategy


class FakeStrategy(SizeStrategy):
    """Returns canned sizes, or raises the canned error for a path."""

    name = "fake"

    def __init__(
        self,
        sizes: dict[str, int] | None = None,
        errors: dict[str, Exception] | None = None,
        default_error: Exception | None = None,
    ):
        self.sizes = sizes or {}
        self.errors = errors or {}
        self.default_error = default_error
        self.calls: list[str] = []

    def measure(self, path: str) -> int:
        self.calls.append(path)
        if path in self.errors:
            raise self.errors[path]
        if path in self.sizes:
            return self.sizes[path]
        if self.default_error is not None:
            raise self.default_error
        return 0


class FakeElevatedExecutor(ElevatedExecutor):
    """Stands in for the interactive password prompt.

    Runs commands as the current user when *approve* is true, otherwise
    fails the way a cancelled dialog does.
    """

    def __init__(
        self,
        approve: bool = True,
        message: str = "User canceled. (-128)",
        installed: bool = True,
    ):
        self.approve = approve
        self.installed = installed
        self.message = message
        self.commands: list[str] = []

    def available(self) -> bool:
        return self.installed

    def run(self, command: str) -> str:
        self.commands.append(command)
        if not self.approve:
            raise CommandFailed(self.message)
        return ShellExecutor().run(command)


class FailingExecutor(ShellExecutor):
    """Fails removal for chosen paths and runs everything else."""

    def __init__(self, failing: set[str], message: str = "rm: Permission denied"):
        self.failing = failing
        self.message = message
        self.commands: list[str] = []

    def run(self, command: str) -> str:
        self.commands.append(command)
        if any(path in command for path in self.failing):
            raise CommandFailed(self.message)
        return super().run(command)


@pytest.fixture
def elevated():
    return FakeElevatedExecutor()


@pytest.fixture
def walk_engine(elevated):
    """Engine with exact (walk-only) sizes and a fake password prompt."""
    return CacheEngine(probe=SizeProbe([WalkStrategy()]), elevated_executor=elevated)


@pytest.fixture
def unreadable_error():
    return PathUnreadable("/denied", "Permission denied")


@pytest.fixture
def isolate_config(tmp_path, monkeypatch):
    """Redirect settings and stats to a temp directory."""
    config_dir = tmp_path / "cachesweep_config"
    monkeypatch.setattr(config, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config, "CONFIG_FILE", config_dir / "config.json")
    monkeypatch.setattr(config, "STATS_FILE", config_dir / "stats.json")
    return config_dir
