# website_updater/exceptions.py
"""
Shared exception classes.

Tier-level problems never surface as exceptions (tiers return None);
these cover the record-level and run-level failures.
"""


class ConfigError(Exception):
    """
    Raised before any record is processed when the run cannot start.

    Examples:
        - Missing directory credentials in unattended mode
        - Unknown configuration keys
    """

    pass


class InputFileError(Exception):
    """Raised when the batch input file is missing or unreadable."""

    pass


class DirectoryServiceError(Exception):
    """
    Raised when a directory service call fails for a single record.

    Examples:
        - Non-2xx HTTP status (message "HTTP <status>: <body>")
        - Connection errors or request timeouts
        - A lookup that returns no usable customer
    """

    pass


__all__ = [
    "ConfigError",
    "InputFileError",
    "DirectoryServiceError",
]
