"""Protocol lists for peers too old to advertise their own.

Releases before FIRST_TOR_VERSION_TO_ADVERTISE_PROTOCOLS never published a
"proto" line, so authorities infer one from the software version.  The
inference is a fixed table of brackets; see LEGACY_PROTOCOLS.

Version ordering is pluggable.  Hosts that already have a comparator pass
it as `is_at_least`; otherwise tor_version_as_new_as() below is used.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Optional

from ._constants import FIRST_TOR_VERSION_TO_ADVERTISE_PROTOCOLS, LEGACY_PROTOCOLS

log = logging.getLogger("protover.legacy")

VersionComparator = Callable[[str, str], bool]

# major.minor.micro[.patchlevel][-status_tag]
_TOR_VERSION = re.compile(
    r"(\d+)\.(\d+)\.(\d+)(?:\.(\d+))?(?:-([A-Za-z0-9.-]+))?"
)


@dataclass(frozen=True, order=True)
class TorVersion:
    """A parsed release number.  Ordering ignores the status tag."""

    major: int
    minor: int
    micro: int
    patchlevel: int = 0
    status_tag: str = field(default="", compare=False)

    @classmethod
    def parse(cls, s: str) -> "TorVersion":
        """Parse "0.2.9.3-alpha", "0.2.7.5", or a "Tor 0.2.7.5 on Linux" platform."""
        s = s.strip()
        if s.startswith("Tor "):
            s = s[len("Tor "):]
        token = s.split(" ", 1)[0]
        m = _TOR_VERSION.fullmatch(token)
        if not m:
            raise ValueError("Invalid Tor version: {!r}".format(s))
        return cls(
            major=int(m.group(1)),
            minor=int(m.group(2)),
            micro=int(m.group(3)),
            patchlevel=int(m.group(4) or 0),
            status_tag=m.group(5) or "",
        )

    @classmethod
    def try_parse(cls, s: str) -> Optional["TorVersion"]:
        try:
            return cls.parse(s)
        except ValueError:
            return None

    def __str__(self) -> str:
        out = "{}.{}.{}.{}".format(self.major, self.minor, self.micro, self.patchlevel)
        if self.status_tag:
            out += "-" + self.status_tag
        return out


def tor_version_as_new_as(platform: str, cutoff: str) -> bool:
    """True iff `platform` is at least as new as `cutoff`.

    A platform we can't parse counts as new: the peer is then expected to
    advertise its protocols itself, which is the safe default.
    """
    theirs = TorVersion.try_parse(platform)
    if theirs is None:
        log.debug("unparseable platform %r, treating as new", platform)
        return True
    return theirs >= TorVersion.parse(cutoff)


def compute_for_old_tor(version: str,
                        is_at_least: Optional[VersionComparator] = None) -> str:
    """Return the protocol list implied by an old software version.

    Empty when the peer is new enough to self-advertise, and empty when it
    predates every bracket we know about.
    """
    if is_at_least is None:
        is_at_least = tor_version_as_new_as

    if is_at_least(version, FIRST_TOR_VERSION_TO_ADVERTISE_PROTOCOLS):
        return ""

    for cutoff, protocols in LEGACY_PROTOCOLS:
        if is_at_least(version, cutoff):
            return protocols
    return ""
