"""Support queries: what we speak, and what a given protocol list claims.

The local table is parsed from SUPPORTED_PROTOCOLS once, on first use,
and never touched again.  Callers get copies, so it stays safe to read
from any thread without locking.
"""

from __future__ import annotations

import functools
import logging
from typing import List, Optional, Tuple, Union

from ._constants import SUPPORTED_PROTOCOLS
from ._entry import ProtoEntry, Protocol, ProtocolName, UnknownProtocol, resolve_name
from ._errors import ProtoverError
from ._versions import VersionSet

log = logging.getLogger("protover.support")


@functools.lru_cache(maxsize=None)
def _supported_table() -> ProtoEntry:
    # Strict: a typo in our own constant should fail loudly, not vanish.
    return ProtoEntry.parse(SUPPORTED_PROTOCOLS)


def supported_protocols() -> ProtoEntry:
    """Return a copy of the local support table."""
    return _supported_table().copy()


def get_supported_protocols() -> str:
    """Return the local support table in canonical string form."""
    return SUPPORTED_PROTOCOLS


def _known(name: Union[ProtocolName, str]) -> Optional[Protocol]:
    if isinstance(name, Protocol):
        return name
    if isinstance(name, UnknownProtocol):
        return None
    resolved = resolve_name(name)
    return resolved if isinstance(resolved, Protocol) else None


def _entry_is_supported(token: str) -> bool:
    """True iff one "name=versions" unit is entirely supported here."""
    try:
        parsed = ProtoEntry.parse_permissive(token)
    except ProtoverError as e:
        log.debug("rejecting malformed entry %r: %s", token, e)
        return False

    table = _supported_table()
    for name, versions in parsed.items():
        local = table.get(name)
        if local is None:
            return False
        if not versions.issubset(local):
            return False
    return True


def all_supported(advertised: str) -> Tuple[bool, str]:
    """Check every entry of an advertised list against the local table.

    Returns (all_ok, unsupported).  Granularity is per entry: "Link=5-6"
    against a local "Link=1-5" reports the whole "Link=5-6", not just 6.
    Each entry is parsed on its own so one bad entry can't hide the rest.
    """
    unsupported: List[str] = []
    for token in advertised.split():
        if not _entry_is_supported(token):
            unsupported.append(token)
    return not unsupported, " ".join(unsupported)


def _lookup(protocols: str, name: Union[ProtocolName, str]) -> Optional[VersionSet]:
    proto = _known(name)
    if proto is None:
        return None
    try:
        parsed = ProtoEntry.parse(protocols)
    except ProtoverError as e:
        log.debug("cannot parse protocol list %r: %s", protocols, e)
        return None
    return parsed.get(proto)


def supports_version(protocols: str, name: Union[ProtocolName, str],
                     version: int) -> bool:
    """True iff `protocols` lists exactly `version` for `name`."""
    versions = _lookup(protocols, name)
    return versions is not None and version in versions


def supports_version_or_later(protocols: str, name: Union[ProtocolName, str],
                              version: int) -> bool:
    """True iff `protocols` lists any version of `name` that is >= `version`.

    "Cons=10" answers yes for 5 even though 5-9 aren't listed.
    """
    versions = _lookup(protocols, name)
    return versions is not None and versions.any_at_least(version)


def is_supported_here(name: Union[ProtocolName, str], version: int) -> bool:
    """True iff this build supports `version` of `name`.  Never raises."""
    proto = _known(name)
    if proto is None:
        return False
    versions = _supported_table().get(proto)
    return versions is not None and version in versions
