#!/usr/bin/env python3
# tools/fuzz_runner.py
#
# Hostile-input fuzzing for the protover parsers.
#
# Generates three fuzz categories:
#   A) random byte-soup strings over the wire alphabet -> strict/permissive parse
#   B) mutations of valid protocol lists               -> strict/permissive parse
#   C) batches of A/B as ballots and advertisements    -> compute_vote, all_supported
#
# Strict parsing may only fail with ProtoverError.  The aggregate operations
# must never raise.  Any other outcome prints a repro and exits non-zero.

import os, sys, random
from typing import Callable, List

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.join(ROOT, "implementations", "python"))

from protover import (
    MAX_EXPANSION,
    ProtoEntry,
    ProtoverError,
    all_supported,
    compute_vote,
    get_supported_protocols,
    supports_version,
    supports_version_or_later,
)

SEED = int(os.environ.get("PROTOVER_SEED", "4242"))
ROUNDS = int(os.environ.get("PROTOVER_FUZZ_ROUNDS", "5000"))

random.seed(SEED)

ALPHABET = "0123456789,-= abcLinkCons\t+_"
BIG = ["4294967295", "4294967294", "4294967296", "99999999999999999999", "65535", "65536"]

def crash(label: str, s, e: BaseException) -> None:
    print("CRASH:", label)
    print("INPUT:", repr(s)[:4000])
    print("EXC  :", type(e).__name__, e)
    raise SystemExit(1)

# --- generators ---

def rand_soup() -> str:
    n = random.randint(0, 40)
    return "".join(random.choice(ALPHABET) for _ in range(n))

def rand_mutation() -> str:
    s = list(get_supported_protocols())
    for _ in range(random.randint(1, 4)):
        r = random.random()
        i = random.randint(0, len(s))
        if r < 0.3 and s:
            del s[min(i, len(s) - 1)]
        elif r < 0.6:
            s.insert(i, random.choice(ALPHABET))
        else:
            s.insert(i, random.choice(BIG))
    return "".join(s)

def rand_input() -> str:
    return rand_soup() if random.random() < 0.5 else rand_mutation()

# --- checks ---

def check_parse(parse: Callable[[str], ProtoEntry], label: str, s: str) -> None:
    try:
        entry = parse(s)
    except ProtoverError:
        return
    except Exception as e:
        crash(label, s, e)
    for _, versions in entry.items():
        if len(versions) > MAX_EXPANSION:
            crash(label + " expansion bound", s, AssertionError(len(versions)))

def check_aggregate(ballots: List[str]) -> None:
    try:
        compute_vote(ballots, random.randint(0, 3))
        for b in ballots:
            all_supported(b)
            supports_version(b, "Link", random.randint(0, 6))
            supports_version_or_later(b, "Cons", random.randint(0, 6))
    except Exception as e:
        crash("aggregate", ballots, e)

def main() -> int:
    for _ in range(ROUNDS):
        s = rand_input()
        check_parse(ProtoEntry.parse, "strict parse", s)
        check_parse(ProtoEntry.parse_permissive, "permissive parse", s)
        check_aggregate([rand_input() for _ in range(random.randint(0, 6))])

    print(f"OK: fuzz passed for ROUNDS={ROUNDS} seed={SEED}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
