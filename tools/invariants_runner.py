#!/usr/bin/env python3
# tools/invariants_runner.py
#
# Determinism invariants (property tests) for protover.
#
# This runner:
# - generates random version sets and ballots within limits
# - checks the canonical-form fixed point for VersionSet and ProtoEntry
# - checks that compute_vote ignores ballot order, is a fixed point at
#   threshold 1, and is unaffected by malformed ballots
#
# Exit code:
#   0 -> all checks passed
#   1 -> invariant violation

import os, sys, random
from typing import List

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.join(ROOT, "implementations", "python"))

from protover import ProtoEntry, VersionSet, compute_vote

SEED = int(os.environ.get("PROTOVER_SEED", "1337"))
TRIALS = int(os.environ.get("PROTOVER_TRIALS", "2000"))
MAX_BALLOTS = int(os.environ.get("PROTOVER_GEN_MAX_BALLOTS", "8"))
MAX_VERSION = int(os.environ.get("PROTOVER_GEN_MAX_VERSION", "40"))

NAMES = ["Cons", "Desc", "DirCache", "HSDir", "HSIntro", "HSRend", "Link",
         "LinkAuth", "Microdesc", "Relay", "Wombat", "Zz", "alpha"]

MALFORMED = ["Link", "=1", "Link=a", "Link=3-1", "Link=1  Cons=1", "Cons=4294967295",
             "Link=0-70000", "Link=1 ", " Link=1", "Link=1,x"]

random.seed(SEED)

def rand_version_list() -> str:
    # Deliberately non-canonical: unsorted, overlapping, with empty tokens.
    toks = []
    for _ in range(random.randint(0, 5)):
        r = random.random()
        lo = random.randint(0, MAX_VERSION)
        if r < 0.5:
            toks.append(str(lo))
        elif r < 0.9:
            toks.append("{}-{}".format(lo, lo + random.randint(0, 6)))
        else:
            toks.append("")
    return ",".join(toks)

def rand_ballot() -> str:
    names = random.sample(NAMES, random.randint(1, 5))
    return " ".join("{}={}".format(n, rand_version_list()) for n in names)

def fail(msg: str, *ctx) -> int:
    print("INVARIANT FAIL:", msg)
    for c in ctx:
        print("  CTX:", repr(c)[:2000])
    return 1

def main() -> int:
    for t in range(TRIALS):
        # (1) VersionSet canonical fixed point
        raw = rand_version_list()
        canon = VersionSet.parse(raw).to_string()
        if VersionSet.parse(canon).to_string() != canon:
            return fail("version set fixed point", raw, canon)

        # (2) ProtoEntry canonical fixed point (permissive names)
        ballot = rand_ballot()
        canon = ProtoEntry.parse_permissive(ballot).to_string()
        if ProtoEntry.parse_permissive(canon).to_string() != canon:
            return fail("proto entry fixed point", ballot, canon)

        ballots: List[str] = [rand_ballot() for _ in range(random.randint(0, MAX_BALLOTS))]
        threshold = random.randint(1, max(1, len(ballots)))
        vote = compute_vote(ballots, threshold)

        # (3) order invariance
        shuffled = list(ballots)
        random.shuffle(shuffled)
        if compute_vote(shuffled, threshold) != vote:
            return fail("ballot order invariance", ballots, shuffled, threshold)

        # (4) idempotence at threshold 1
        if compute_vote([vote], 1) != vote:
            return fail("vote idempotence", ballots, threshold, vote)

        # (5) malformed ballots are inert
        if ballots:
            polluted = list(ballots)
            for _ in range(random.randint(1, 3)):
                polluted.insert(random.randint(0, len(polluted)), random.choice(MALFORMED))
            if compute_vote(polluted, threshold) != vote:
                return fail("malformed ballot changed result", ballots, polluted, threshold)

        # (6) threshold monotonicity: raising it never adds versions
        if threshold > 1:
            looser = ProtoEntry.parse_permissive(compute_vote(ballots, threshold - 1))
            for name, versions in ProtoEntry.parse_permissive(vote).items():
                wider = looser.get(name)
                if wider is None or not versions.issubset(wider):
                    return fail("threshold monotonicity", ballots, threshold, name)

    print(f"OK: invariants passed for TRIALS={TRIALS} seed={SEED}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
