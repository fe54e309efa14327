"""Exception hierarchy shared by the adapters, backups and orchestrators."""

from __future__ import annotations

from pathlib import Path


class RelayError(Exception):
    pass


class DocumentMalformedError(RelayError):
    """A native config file exists but cannot be parsed.

    Raised instead of starting from an empty tree: overwriting a file we
    could not read would destroy whatever the user had in it.
    """

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot parse {path}: {reason}")


class DocumentIOError(RelayError):
    """Filesystem failure while reading or writing a native file."""

    def __init__(self, path: Path, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"{path}: {cause.strerror or cause}")


class NoBackupFoundError(RelayError):
    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"No backup found for {path}")


class InvalidNameError(RelayError, ValueError):
    """Resource name that cannot be used as a file or directory name."""


class EmptyRegistryError(RelayError):
    pass
