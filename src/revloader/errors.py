"""
Error types for the revision loader.

Query failures (diffs, distances, untracked listings) are never raised: they
come back as empty values. Only failures that stop a load cycle before it
starts have an exception type.
"""


class RevLoaderError(Exception):
    """Base class for loader errors."""


class ConfigurationError(RevLoaderError):
    """No working directory has been configured."""


class NotARepositoryError(RevLoaderError):
    """The working directory is not inside a Git repository."""

    def __init__(self, path: str):
        super().__init__(f"The working directory is not a Git repository: {path}")
        self.path = path


class LoadInProgressError(RevLoaderError):
    """A load cycle is already running; the request was dropped."""

    def __init__(self):
        super().__init__("Git is currently loading data.")
