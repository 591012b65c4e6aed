"""protover constants: version limits, the local support table, legacy brackets.

Everything here is static data.  The support table is a string on purpose:
it is parsed once, on first use, by the same parser that handles
advertisements from the network.
"""

from __future__ import annotations

from typing import Tuple

# ── Version numbers ──────────────────────────────────────────
# Versions are unsigned 32-bit.  The all-ones value is reserved and never
# a valid version, so the largest usable one is one below it.
RESERVED_VERSION: int = 2**32 - 1
MAX_VERSION: int = RESERVED_VERSION - 1

# ── Normative safety limit ───────────────────────────────────
# A compact string like "0-4294967294" would otherwise expand to four
# billion set members.  No VersionSet may ever hold more than this.
MAX_EXPANSION: int = 1 << 16

# ── Local support table ──────────────────────────────────────
# What this build speaks.  Must stay in canonical form: it is handed out
# verbatim by get_supported_protocols().
SUPPORTED_PROTOCOLS: str = (
    "Cons=1-2 "
    "Desc=1-2 "
    "DirCache=1-2 "
    "HSDir=1-2 "
    "HSIntro=3-4 "
    "HSRend=1-2 "
    "Link=1-5 "
    "LinkAuth=1,3 "
    "Microdesc=1-2 "
    "Relay=1-2"
)

# ── Legacy peers ─────────────────────────────────────────────
# The first release that put "proto" lines in its own descriptors.
# Anything at least this new speaks for itself.
FIRST_TOR_VERSION_TO_ADVERTISE_PROTOCOLS: str = "0.2.9.3-alpha"

# Newest bracket first.  The first cutoff the peer meets wins.
LEGACY_PROTOCOLS: Tuple[Tuple[str, str], ...] = (
    ("0.2.9.1-alpha",
     "Cons=1-2 Desc=1-2 DirCache=1 HSDir=1 HSIntro=3 HSRend=1-2 "
     "Link=1-4 LinkAuth=1 Microdesc=1-2 Relay=1-2"),
    ("0.2.7.5",
     "Cons=1-2 Desc=1-2 DirCache=1 HSDir=1 HSIntro=3 HSRend=1 "
     "Link=1-4 LinkAuth=1 Microdesc=1-2 Relay=1-2"),
    ("0.2.4.19",
     "Cons=1 Desc=1 DirCache=1 HSDir=1 HSIntro=3 HSRend=1 "
     "Link=1-4 LinkAuth=1 Microdesc=1 Relay=1-2"),
)
