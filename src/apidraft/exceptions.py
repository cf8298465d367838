"""Exception hierarchy for apidraft.

All exceptions inherit from :class:`ApidraftError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`apidraft.exit_codes`.
The top-level error handler in :func:`apidraft.app.main` catches
``ApidraftError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

The import core itself (:mod:`apidraft.parser`) never raises for malformed
input; it returns ``None``. These exceptions belong to the I/O edges: the
source loader, configuration, and the CLI.

Subclass hierarchy::

    ApidraftError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- SourceLoadError     (exit 6)
    +-- ImportParseError    (exit 7)
    +-- ConfigError         (exit 1)
"""

from apidraft.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_IMPORT_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SOURCE_ERROR,
)


class ApidraftError(Exception):
    """Base exception for all apidraft errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`apidraft.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ApidraftError):
    """Raised for invalid CLI arguments."""

    exit_code = EXIT_INVALID_USAGE


class SourceLoadError(ApidraftError):
    """Raised when a file, URL, or stdin source cannot be read or decoded."""

    exit_code = EXIT_SOURCE_ERROR


class ImportParseError(ApidraftError):
    """Raised by the CLI when an input yields no curl request or no operations."""

    exit_code = EXIT_IMPORT_FAILURE


class ConfigError(ApidraftError):
    """Raised for configuration problems (invalid JSON, bad field values)."""

    exit_code = EXIT_GENERIC_FAILURE
