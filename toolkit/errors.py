"""Exception types raised by the catalog engine."""


class ToolkitError(Exception):
    """Base class for engine errors."""


class RegistryNotReady(ToolkitError):
    """The tool registry did not signal readiness in time."""
