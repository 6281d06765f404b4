"""Error taxonomy for the IssueDesk core.

Services raise these and let them propagate; adapters decide how to
present them (the CLI turns them into error results).
"""


class IssueDeskError(Exception):
    """Base class for errors raised by the core services."""


class NotFoundError(IssueDeskError, LookupError):
    """A requested resource does not exist or has no available copy."""


class InvalidConfigurationError(IssueDeskError, ValueError):
    """The loan policy cannot handle the given input (e.g. unknown member type)."""
