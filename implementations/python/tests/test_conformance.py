"""protover conformance test suite.

Runs every vector in conformance/protover_vectors.json.

Usage:
    python tests/test_conformance.py [--vectors-dir DIR]
    python -m pytest tests/test_conformance.py -v
    PYTHONPATH=. PROTOVER_VECTORS_DIR=../../conformance python tests/test_conformance.py
"""

from __future__ import annotations

import argparse
import json
import os
import sys
import unittest
from typing import Any, Dict, List, Optional, Tuple

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from protover import (
    ProtoEntry,
    ProtoverError,
    VersionSet,
    all_supported,
    compute_for_old_tor,
    compute_vote,
    is_supported_here,
    supports_version,
    supports_version_or_later,
)

_VECTORS_FILE = "protover_vectors.json"

# ── Locate conformance data ───────────────────────────────────

_VECTORS_DIR: Optional[str] = os.environ.get("PROTOVER_VECTORS_DIR", None)


def _find_vectors_dir() -> str:
    if _VECTORS_DIR:
        return _VECTORS_DIR
    candidates = [
        os.path.join(os.path.dirname(__file__), "..", "..", "..", "conformance"),
        os.path.join(os.path.dirname(__file__), "..", "..", "conformance"),
        os.path.join(os.path.dirname(__file__), "..", "conformance"),
    ]
    for d in candidates:
        if os.path.isfile(os.path.join(d, _VECTORS_FILE)):
            return d
    raise FileNotFoundError(
        "Cannot find conformance vectors. Set PROTOVER_VECTORS_DIR or --vectors-dir."
    )


def _load_vectors() -> List[dict]:
    d = _find_vectors_dir()
    with open(os.path.join(d, _VECTORS_FILE), "r", encoding="utf-8") as f:
        return json.load(f)["vectors"]


def _run_vector(vec: dict) -> Dict[str, Any]:
    """Execute one conformance vector.  Returns {"out": ...} or {"err": ...}."""
    op = vec["op"]
    try:
        if op == "versions":
            return {"out": VersionSet.parse(vec["input"]).to_string()}
        elif op == "entry":
            return {"out": ProtoEntry.parse(vec["input"]).to_string()}
        elif op == "entry_permissive":
            return {"out": ProtoEntry.parse_permissive(vec["input"]).to_string()}
        elif op == "all_supported":
            ok, missing = all_supported(vec["input"])
            return {"out": [ok, missing]}
        elif op == "supports":
            return {"out": supports_version(vec["input"], vec["name"], vec["version"])}
        elif op == "supports_or_later":
            return {"out": supports_version_or_later(vec["input"], vec["name"],
                                                     vec["version"])}
        elif op == "here":
            return {"out": is_supported_here(vec["name"], vec["version"])}
        elif op == "vote":
            return {"out": compute_vote(vec["ballots"], vec["threshold"])}
        elif op == "old_tor":
            return {"out": compute_for_old_tor(vec["input"])}
        else:
            return {"err": "UNKNOWN_OP"}
    except ProtoverError as e:
        return {"err": e.code}


# ── unittest integration ──────────────────────────────────────

class ConformanceTests(unittest.TestCase):
    """Dynamically generated: one test method per vector."""
    pass


def _make_test(vec: dict):
    def test_fn(self: unittest.TestCase) -> None:
        got = _run_vector(vec)
        self.assertEqual(got, vec["expect"],
                         "{}: got {} expected {}".format(vec["test_id"], got, vec["expect"]))
    return test_fn


# Attach test methods at import time.
try:
    for _vec in _load_vectors():
        _tid = _vec["test_id"]
        _fn = _make_test(_vec)
        _fn.__name__ = "test_{}".format(_tid)
        _fn.__qualname__ = "ConformanceTests.test_{}".format(_tid)
        setattr(ConformanceTests, "test_{}".format(_tid), _fn)
except FileNotFoundError:
    pass


class VectorFileTests(unittest.TestCase):
    def test_vectors_found(self):
        self.assertTrue(_load_vectors())

    def test_ids_unique(self):
        ids = [v["test_id"] for v in _load_vectors()]
        self.assertEqual(len(ids), len(set(ids)))


# ── Standalone CLI runner ─────────────────────────────────────

def main() -> None:
    global _VECTORS_DIR

    parser = argparse.ArgumentParser(description="protover conformance runner")
    parser.add_argument("--vectors-dir", default=None,
                        help="Directory with {}".format(_VECTORS_FILE))
    args, _remaining = parser.parse_known_args()

    if args.vectors_dir:
        _VECTORS_DIR = args.vectors_dir
        os.environ["PROTOVER_VECTORS_DIR"] = args.vectors_dir

    vectors = _load_vectors()

    passed = 0
    failed = 0
    failures: List[Tuple[str, dict, dict]] = []

    for vec in vectors:
        got = _run_vector(vec)
        if got == vec["expect"]:
            passed += 1
        else:
            failed += 1
            failures.append((vec["test_id"], got, vec["expect"]))

    print("CONFORMANCE: {}/{} PASS".format(passed, passed + failed))
    for tid, got, exp in failures:
        print("  FAIL {}: got={} expected={}".format(tid, got, exp))

    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()
