"""VersionSet: a bounded set of subprotocol version numbers.

Wire form is a comma-separated list of integers and inclusive ranges:

    "1-3,5"   → {1, 2, 3, 5}
    ""        → {}

The canonical form is ascending, with every run of consecutive values
collapsed into "lo-hi".  Parsing is the dangerous direction: the string
"0-4294967294" is twelve bytes long, so cardinality is capped at
MAX_EXPANSION and a range wider than that is refused before anything is
allocated for it.
"""

from __future__ import annotations

import re
from typing import Iterable, Iterator, List, Optional, Set

from ._constants import MAX_EXPANSION, RESERVED_VERSION
from ._errors import (
    ERR_BAD_RANGE,
    ERR_NON_NUMERIC_VERSION,
    ERR_RESERVED_VERSION,
    ERR_TOO_MANY_VERSIONS,
    ProtoverError,
)

# str.isdigit() and int() both accept things we don't: Unicode digits,
# "+1", " 1", "1_000".  The wire format is ASCII decimal, nothing else.
_DIGITS = re.compile(r"[0-9]+")


def _parse_version(tok: str) -> int:
    """Parse one decimal version number."""
    if not _DIGITS.fullmatch(tok):
        raise ProtoverError(ERR_NON_NUMERIC_VERSION,
                            "version {!r} is not a decimal number".format(tok))
    val = int(tok)
    if val > RESERVED_VERSION:
        raise ProtoverError(ERR_NON_NUMERIC_VERSION,
                            "version {!r} does not fit in 32 bits".format(tok))
    if val == RESERVED_VERSION:
        raise ProtoverError(ERR_RESERVED_VERSION,
                            "version {} is reserved".format(val))
    return val


def _check_version(val: int) -> None:
    """Validate a version supplied programmatically rather than parsed."""
    if isinstance(val, bool) or not isinstance(val, int):
        raise ProtoverError(ERR_NON_NUMERIC_VERSION,
                            "version must be an int, not {}".format(type(val).__name__))
    if val < 0 or val > RESERVED_VERSION:
        raise ProtoverError(ERR_NON_NUMERIC_VERSION,
                            "version {} out of u32 range".format(val))
    if val == RESERVED_VERSION:
        raise ProtoverError(ERR_RESERVED_VERSION,
                            "version {} is reserved".format(val))


def _too_many() -> ProtoverError:
    return ProtoverError(ERR_TOO_MANY_VERSIONS,
                         "more than {} versions".format(MAX_EXPANSION))


class VersionSet:
    """An unordered set of versions with a canonical, ordered string form."""

    __slots__ = ("_versions",)

    def __init__(self) -> None:
        self._versions: Set[int] = set()

    # ── Construction ─────────────────────────────────────────

    @classmethod
    def parse(cls, s: str) -> "VersionSet":
        """Parse a version list such as "1-4,6".

        Empty tokens are skipped, so "" and "1,,2," are both fine.  The
        size bound is checked after every token, not just at the end.
        """
        out = cls()
        vs = out._versions
        for tok in s.split(","):
            if tok == "":
                continue
            if "-" in tok:
                lo_s, _, hi_s = tok.partition("-")
                lo = _parse_version(lo_s)
                hi = _parse_version(hi_s)
                if lo > hi:
                    raise ProtoverError(ERR_BAD_RANGE,
                                        "range {!r} is backwards".format(tok))
                # Refuse before expanding: a single range is enough to DoS.
                if hi - lo + 1 > MAX_EXPANSION:
                    raise _too_many()
                vs.update(range(lo, hi + 1))
            else:
                vs.add(_parse_version(tok))

            if len(vs) > MAX_EXPANSION:
                raise _too_many()
        return out

    @classmethod
    def from_iterable(cls, values: Iterable[int]) -> "VersionSet":
        out = cls()
        out.update(values)
        return out

    def copy(self) -> "VersionSet":
        out = VersionSet()
        out._versions = set(self._versions)
        return out

    # ── Mutation (bounded) ───────────────────────────────────

    def add(self, version: int) -> None:
        _check_version(version)
        if version not in self._versions and len(self._versions) >= MAX_EXPANSION:
            raise _too_many()
        self._versions.add(version)

    def update(self, values: Iterable[int]) -> None:
        for v in values:
            self.add(v)

    def discard(self, version: int) -> None:
        self._versions.discard(version)

    # ── Queries ──────────────────────────────────────────────

    def __contains__(self, version: object) -> bool:
        return version in self._versions

    def __len__(self) -> int:
        return len(self._versions)

    def __bool__(self) -> bool:
        return bool(self._versions)

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._versions))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, VersionSet):
            return self._versions == other._versions
        if isinstance(other, (set, frozenset)):
            return self._versions == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def issubset(self, other: "VersionSet") -> bool:
        return self._versions <= other._versions

    def difference(self, other: "VersionSet") -> "VersionSet":
        out = VersionSet()
        out._versions = self._versions - other._versions
        return out

    def union(self, other: "VersionSet") -> "VersionSet":
        out = self.copy()
        out.update(other._versions)
        return out

    def max_version(self) -> Optional[int]:
        return max(self._versions) if self._versions else None

    def any_at_least(self, version: int) -> bool:
        """True iff some member is >= version.  Not a contiguity check."""
        return any(v >= version for v in self._versions)

    # ── Encoding ─────────────────────────────────────────────

    def to_string(self) -> str:
        """Canonical form: ascending, consecutive runs compacted."""
        out: List[str] = []
        ordered = sorted(self._versions)
        i = 0
        while i < len(ordered):
            lo = hi = ordered[i]
            i += 1
            while i < len(ordered) and ordered[i] == hi + 1:
                hi = ordered[i]
                i += 1
            out.append(str(lo) if lo == hi else "{}-{}".format(lo, hi))
        return ",".join(out)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return "VersionSet({!r})".format(self.to_string())
