"""ProtoEntry: protocol names mapped to VersionSets.

Wire form is space-separated "name=versions" units:

    "HSDir=1-2 Link=1-4,6"

Two parse modes share one tokenizer:

  strict      every name must be one of the ten known protocols
              (ERR_UNKNOWN_PROTOCOL otherwise).  Used for lookups.
  permissive  unknown names are kept as UnknownProtocol(name).  Used for
              voting and support checks, where a newer peer may advertise
              protocols this build has never heard of.

Output is always sorted by wire name, whatever the insertion order.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple, Union

from ._errors import ERR_UNKNOWN_PROTOCOL, ERR_UNPARSEABLE, ProtoverError
from ._versions import VersionSet


class Protocol(Enum):
    """The closed set of subprotocols this build knows about.

    The value is the wire name.
    """

    CONS = "Cons"
    DESC = "Desc"
    DIR_CACHE = "DirCache"
    HS_DIR = "HSDir"
    HS_INTRO = "HSIntro"
    HS_REND = "HSRend"
    LINK = "Link"
    LINK_AUTH = "LinkAuth"
    MICRODESC = "Microdesc"
    RELAY = "Relay"

    def __str__(self) -> str:
        return self.value


_BY_WIRE_NAME: Dict[str, Protocol] = {p.value: p for p in Protocol}


@dataclass(frozen=True)
class UnknownProtocol:
    """A protocol name outside the closed set, kept verbatim."""

    value: str

    def __str__(self) -> str:
        return self.value


ProtocolName = Union[Protocol, UnknownProtocol]


def protocol_for_name(name: str) -> Protocol:
    """Resolve a wire name to a known Protocol, or raise."""
    try:
        return _BY_WIRE_NAME[name]
    except KeyError:
        raise ProtoverError(ERR_UNKNOWN_PROTOCOL,
                            "unknown protocol {!r}".format(name)) from None


def resolve_name(name: str) -> ProtocolName:
    """Resolve a wire name, falling back to UnknownProtocol."""
    proto = _BY_WIRE_NAME.get(name)
    if proto is None:
        return UnknownProtocol(name)
    return proto


def _as_key(name: Union[ProtocolName, str]) -> ProtocolName:
    if isinstance(name, (Protocol, UnknownProtocol)):
        return name
    return resolve_name(name)


def split_entry(token: str) -> Tuple[str, str]:
    """Split one "name=versions" unit at its first "="."""
    name, sep, versions = token.partition("=")
    if not sep:
        raise ProtoverError(ERR_UNPARSEABLE,
                            "entry {!r} has no '='".format(token))
    if name == "":
        raise ProtoverError(ERR_UNPARSEABLE,
                            "entry {!r} has an empty name".format(token))
    return name, versions


class ProtoEntry:
    """Mapping from protocol name to the VersionSet advertised for it."""

    def __init__(self) -> None:
        self._entries: Dict[ProtocolName, VersionSet] = {}

    # ── Parsing ──────────────────────────────────────────────

    @classmethod
    def parse(cls, s: str) -> "ProtoEntry":
        """Strict parse: every name must be a known Protocol."""
        return cls._parse(s, strict=True)

    @classmethod
    def parse_permissive(cls, s: str) -> "ProtoEntry":
        """Permissive parse: unknown names become UnknownProtocol keys."""
        return cls._parse(s, strict=False)

    @classmethod
    def _parse(cls, s: str, strict: bool) -> "ProtoEntry":
        out = cls()
        if s == "":
            return out
        # Single spaces only: "a=1  b=2" has an empty unit and is malformed.
        for token in s.split(" "):
            name, versions = split_entry(token)
            key: ProtocolName
            if strict:
                key = protocol_for_name(name)
            else:
                key = resolve_name(name)
            # Later duplicates win.
            out._entries[key] = VersionSet.parse(versions)
        return out

    def copy(self) -> "ProtoEntry":
        out = ProtoEntry()
        out._entries = {k: v.copy() for k, v in self._entries.items()}
        return out

    # ── Mapping protocol ─────────────────────────────────────

    def get(self, name: Union[ProtocolName, str]) -> Optional[VersionSet]:
        return self._entries.get(_as_key(name))

    def __getitem__(self, name: Union[ProtocolName, str]) -> VersionSet:
        return self._entries[_as_key(name)]

    def __setitem__(self, name: Union[ProtocolName, str], versions: VersionSet) -> None:
        self._entries[_as_key(name)] = versions

    def __delitem__(self, name: Union[ProtocolName, str]) -> None:
        del self._entries[_as_key(name)]

    def __contains__(self, name: object) -> bool:
        if isinstance(name, str):
            name = resolve_name(name)
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ProtocolName]:
        return iter(self._sorted_keys())

    def items(self) -> List[Tuple[ProtocolName, VersionSet]]:
        return [(k, self._entries[k]) for k in self._sorted_keys()]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ProtoEntry):
            return NotImplemented
        return self._entries == other._entries

    __hash__ = None  # type: ignore[assignment]

    def _sorted_keys(self) -> List[ProtocolName]:
        return sorted(self._entries, key=lambda k: k.value)

    # ── Encoding ─────────────────────────────────────────────

    def to_string(self) -> str:
        """Canonical form: sorted by name, empty version sets omitted."""
        parts: List[str] = []
        for key, versions in self.items():
            if not versions:
                continue
            parts.append("{}={}".format(key.value, versions.to_string()))
        return " ".join(parts)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return "ProtoEntry({!r})".format(self.to_string())
