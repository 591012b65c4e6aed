"""protover: parsing, support checks and voting for subprotocol version lists.

Peers advertise what they speak as compact strings:

    >>> from protover import ProtoEntry
    >>> str(ProtoEntry.parse("Link=1,2,3,5 HSDir=1-2"))
    'HSDir=1-2 Link=1-3,5'

Directory authorities merge many such advertisements into a consensus:

    >>> from protover import compute_vote
    >>> compute_vote(["Link=3-4", "Link=3"], 2)
    'Link=3'

Relays check whether they, or a peer, support a given version:

    >>> from protover import Protocol, all_supported, supports_version_or_later
    >>> all_supported("Link=5-6")
    (False, 'Link=5-6')
    >>> supports_version_or_later("Cons=5", Protocol.CONS, 4)
    True

Every input here may come from an untrusted peer.  Parsing is bounded
(MAX_EXPANSION versions per set), and the aggregate operations skip bad
units rather than failing as a whole.
"""

from __future__ import annotations

from ._constants import (
    FIRST_TOR_VERSION_TO_ADVERTISE_PROTOCOLS,
    MAX_EXPANSION,
    MAX_VERSION,
    RESERVED_VERSION,
)
from ._entry import ProtoEntry, Protocol, ProtocolName, UnknownProtocol
from ._errors import (
    ERR_BAD_RANGE,
    ERR_NON_NUMERIC_VERSION,
    ERR_RESERVED_VERSION,
    ERR_TOO_MANY_VERSIONS,
    ERR_UNKNOWN_PROTOCOL,
    ERR_UNPARSEABLE,
    ProtoverError,
)
from ._legacy import TorVersion, compute_for_old_tor, tor_version_as_new_as
from ._support import (
    all_supported,
    get_supported_protocols,
    is_supported_here,
    supported_protocols,
    supports_version,
    supports_version_or_later,
)
from ._versions import VersionSet
from ._vote import compute_vote

__version__ = "0.3.0"

__all__ = [
    # Types
    "VersionSet",
    "ProtoEntry",
    "Protocol",
    "ProtocolName",
    "UnknownProtocol",
    "TorVersion",
    # Support queries
    "all_supported",
    "supports_version",
    "supports_version_or_later",
    "is_supported_here",
    "get_supported_protocols",
    "supported_protocols",
    # Voting
    "compute_vote",
    # Legacy peers
    "compute_for_old_tor",
    "tor_version_as_new_as",
    # Limits
    "MAX_EXPANSION",
    "MAX_VERSION",
    "RESERVED_VERSION",
    "FIRST_TOR_VERSION_TO_ADVERTISE_PROTOCOLS",
    # Exception
    "ProtoverError",
    # Error codes
    "ERR_UNPARSEABLE",
    "ERR_UNKNOWN_PROTOCOL",
    "ERR_NON_NUMERIC_VERSION",
    "ERR_BAD_RANGE",
    "ERR_RESERVED_VERSION",
    "ERR_TOO_MANY_VERSIONS",
]
