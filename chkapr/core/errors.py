"""Process exit codes of the approval gate.

Pipelines branch on these values, so they must stay stable once released.
- 0: Gate passed
- 1: User error (bad option, unreadable config)
- 2: Environment error (gh not installed)
- 3: Gate error (release missing or malformed, pull request list missing)
- 4: Network error (GitHub query failed)
- 5: I/O error (snapshot could not be read or decoded)
- 6: Nothing approved while an approval was required
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for the ``chkapr`` command."""

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    GATE_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5
    NO_APPROVAL = 6
