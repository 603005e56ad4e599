"""Error kinds raised by the scanning and cleaning engine."""


class CacheError(Exception):
    """Base class for cachesweep errors."""


class PathNotFound(CacheError):
    """Deletion was requested on a path that does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"The specified path could not be found: {path}")


class InvalidOutput(CacheError):
    """A size command produced output that could not be parsed."""

    def __init__(self, output: str):
        self.output = output
        super().__init__(f"Failed to parse output from shell command: {output.strip()!r}")


class CommandFailed(CacheError):
    """An external command exited non-zero or could not be started."""

    def __init__(self, output: str):
        self.output = output
        super().__init__(f"Shell command failed: {output.strip()}")


class PathUnreadable(CacheError):
    """The root of a directory tree could not be listed."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        message = f"Cannot read directory: {path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
