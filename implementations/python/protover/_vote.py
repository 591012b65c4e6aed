"""Protocol voting: merge many advertisements into one consensus string.

Each ballot is one peer's raw protocol list.  A (name, version) pair makes
it into the result when at least `threshold` ballots list it.  The tally
is a plain multiset count, so ballot order can't affect the outcome, and
the output is itself a valid ballot: voting on it alone with threshold 1
gives it back unchanged.

Ballots that don't parse are dropped, not reported.  A directory
authority votes over thousands of descriptors and must not let one of
them abort the whole computation.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, Iterable

from ._entry import ProtoEntry, ProtocolName
from ._errors import ProtoverError
from ._versions import VersionSet

log = logging.getLogger("protover.vote")


def _tally(ballots: Iterable[str]) -> Dict[ProtocolName, Counter]:
    tally: Dict[ProtocolName, Counter] = {}
    for ballot in ballots:
        try:
            parsed = ProtoEntry.parse_permissive(ballot)
        except ProtoverError as e:
            log.debug("skipping malformed ballot %r: %s", ballot, e)
            continue
        # VersionSet is a set, so a ballot counts each version once.
        for name, versions in parsed.items():
            tally.setdefault(name, Counter()).update(versions)
    return tally


def compute_vote(ballots: Iterable[str], threshold: int) -> str:
    """Return every protocol version listed by at least `threshold` ballots.

    The result is in canonical form: names alphabetical, versions
    ascending and range-compacted, empty protocols left out.
    """
    ballots = list(ballots)
    if not ballots:
        return ""

    result = ProtoEntry()
    for name, counts in _tally(ballots).items():
        winners = [v for v, n in counts.items() if n >= threshold]
        if not winners:
            continue
        try:
            result[name] = VersionSet.from_iterable(winners)
        except ProtoverError as e:
            # Keeps the output re-parseable by the same rules as any ballot.
            log.warning("dropping %s from vote: %s", name, e)
    return result.to_string()
