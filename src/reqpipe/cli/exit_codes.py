# topmark:header:start
#
#   project      : ReqPipe
#   file         : exit_codes.py
#   file_relpath : src/reqpipe/cli/exit_codes.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exit codes for the ReqPipe CLI.

ReqPipe aligns with the BSD `sysexits` convention so that shell scripts can
tell a network failure from a bad invocation or a broken configuration.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Standardized exit codes for the ReqPipe CLI.

    Attributes:
        SUCCESS: The call completed and produced a response (any HTTP status).
        FAILURE: Generic failure (non-specific error).
        USAGE_ERROR: Command-line invocation error (invalid flags/args, bad
            target URL). Mirrors BSD ``EX_USAGE (64)``.
        DATA_ERROR: A body could not be encoded or decoded. Mirrors BSD
            ``EX_DATAERR (65)``.
        UNAVAILABLE: The remote could not be reached or a redirect could not
            be followed. Mirrors BSD ``EX_UNAVAILABLE (69)``.
        PIPELINE_ERROR: Internal pipeline failure (step contract violation).
            Mirrors BSD ``EX_SOFTWARE (70)``.
        CONFIG_ERROR: Configuration error (unreadable/invalid TOML, unknown
            keys). Mirrors BSD ``EX_CONFIG (78)``.
        UNEXPECTED_ERROR: Unhandled/unknown error (last resort).
    """

    SUCCESS = 0
    FAILURE = 1

    # sysexits-aligned values
    USAGE_ERROR = 64  # EX_USAGE
    DATA_ERROR = 65  # EX_DATAERR
    UNAVAILABLE = 69  # EX_UNAVAILABLE
    PIPELINE_ERROR = 70  # EX_SOFTWARE
    CONFIG_ERROR = 78  # EX_CONFIG

    UNEXPECTED_ERROR = 255
