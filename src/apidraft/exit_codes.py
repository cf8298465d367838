"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~apidraft.exceptions.ApidraftError` subclass.
Shell wrappers can inspect the exit code to tell a bad invocation apart from
an unreadable source or an input that held nothing importable.

Example::

    $ apidraft curl "wget https://example.com"
    $ echo $?
    7   # EXIT_IMPORT_FAILURE -- the text is not a curl command
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_SOURCE_ERROR = 6
"""The input source could not be read (missing file, network failure, bad encoding)."""

EXIT_IMPORT_FAILURE = 7
"""The input was read but produced nothing importable."""
