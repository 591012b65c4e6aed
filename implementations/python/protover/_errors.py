"""protover error codes and exception class.

Every failure in this package is a ProtoverError carrying one of the
ERR_* codes below.  Strict parsers raise on the first problem they see.
The aggregate operations (all_supported, compute_vote) catch these per
entry or per ballot and keep going, so one hostile peer can't abort a
computation that involves many.
"""

from __future__ import annotations

# ── Error codes ──────────────────────────────────────────────
# Grep-friendly, stable across releases.  Tests and the CLI compare these.

ERR_UNPARSEABLE: str = "ERR_UNPARSEABLE"                  # no "=", empty name
ERR_UNKNOWN_PROTOCOL: str = "ERR_UNKNOWN_PROTOCOL"        # strict mode only
ERR_NON_NUMERIC_VERSION: str = "ERR_NON_NUMERIC_VERSION"  # not base-10 u32
ERR_BAD_RANGE: str = "ERR_BAD_RANGE"                      # lo > hi
ERR_RESERVED_VERSION: str = "ERR_RESERVED_VERSION"        # 2**32 - 1
ERR_TOO_MANY_VERSIONS: str = "ERR_TOO_MANY_VERSIONS"      # > MAX_EXPANSION

ALL_CODES = (
    ERR_UNPARSEABLE,
    ERR_UNKNOWN_PROTOCOL,
    ERR_NON_NUMERIC_VERSION,
    ERR_BAD_RANGE,
    ERR_RESERVED_VERSION,
    ERR_TOO_MANY_VERSIONS,
)


class ProtoverError(Exception):
    """Exception for protocol-list parsing and validation errors.

    The `.code` attribute is one of the ERR_* strings above.
    """

    def __init__(self, code: str, msg: str = "") -> None:
        super().__init__(msg or code)
        self.code = code
