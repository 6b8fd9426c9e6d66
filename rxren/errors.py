class RenameToolError(Exception):
    """Base error for rxren."""


class ConfigError(RenameToolError):
    """Invalid startup configuration (bad pattern, missing replacement, conflicting flags)."""


class WalkError(RenameToolError):
    """A root could not be expanded or traversed. Aborts the whole run."""


class WorkerError(RenameToolError):
    """A rename worker crashed with an unexpected exception."""
