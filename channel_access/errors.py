"""Exceptions raised while resolving the command line."""


class UsageError(Exception):
    """Raised when arguments or option values cannot be understood.

    The entry point prints the usage text and exits with status 1; nothing
    else runs once this has been raised.
    """
