"""Error taxonomy for contributor extraction.

Only ``EnvironmentUnavailable`` is ever recovered from (the plugin checks for
git up front and no-ops); everything else propagates to the caller.
"""


class ContributorsError(Exception):
    pass


class EnvironmentUnavailable(ContributorsError, FileNotFoundError):
    """The version-control executable is not on PATH."""


class HistoryDecodeError(ContributorsError, ValueError):
    """History output was not valid UTF-8."""


class ResourceLoadError(ContributorsError, ValueError):
    """The canonical identity mapping is missing or malformed."""


class ExternalToolError(ContributorsError, RuntimeError):
    """The history command exited non-zero or timed out."""

    def __init__(self, message: str, *, command=None, stderr: str = ""):
        super().__init__(message)
        self.command = list(command or [])
        self.stderr = stderr
