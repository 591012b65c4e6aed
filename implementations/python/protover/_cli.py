"""protover command-line interface.

Usage:
    printf 'Link=1-4\\nLink=3\\n' | python3 -m protover vote --threshold 2
    python3 -m protover canon "Link=1,2,3,5 HSDir=1-2"
    python3 -m protover check "Link=1-5 Cons=1-3"
    python3 -m protover supports "Link=3-4 Cons=5" Cons 4 --or-later
    python3 -m protover here Link 5
    python3 -m protover supported
    python3 -m protover old-tor 0.2.7.5
    python3 -m protover version
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from . import (
    ProtoEntry,
    ProtoverError,
    __version__,
    all_supported,
    compute_for_old_tor,
    compute_vote,
    get_supported_protocols,
    is_supported_here,
    supports_version,
    supports_version_or_later,
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="protover",
        description="protover: subprotocol version lists, support checks and voting",
    )
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log skipped ballots and rejected entries to stderr")
    sub = parser.add_subparsers(dest="command")

    # ── vote ──
    vote_p = sub.add_parser("vote", help="Compute a consensus over ballots")
    vote_p.add_argument("--threshold", "-t", type=int, required=True,
                        help="Minimum ballots listing a version for it to pass")
    vote_p.add_argument("--input", "-i", metavar="FILE",
                        help="Read ballots (one per line) from FILE instead of stdin")

    # ── canon ──
    canon_p = sub.add_parser("canon", help="Print a protocol list in canonical form")
    canon_p.add_argument("protocols", help="Protocol list to normalize")
    canon_p.add_argument("--permissive", action="store_true",
                         help="Keep protocol names this build doesn't know")

    # ── check ──
    check_p = sub.add_parser("check", help="Report entries this build doesn't support")
    check_p.add_argument("protocols", help="Advertised protocol list")

    # ── supports ──
    sup_p = sub.add_parser("supports", help="Does a protocol list include NAME=VERSION?")
    sup_p.add_argument("protocols", help="Protocol list to query")
    sup_p.add_argument("name", help="Protocol name, e.g. Link")
    sup_p.add_argument("version", type=int, help="Version number")
    sup_p.add_argument("--or-later", action="store_true",
                       help="Also accept any later version")

    # ── here ──
    here_p = sub.add_parser("here", help="Does this build support NAME=VERSION?")
    here_p.add_argument("name", help="Protocol name, e.g. Link")
    here_p.add_argument("version", type=int, help="Version number")

    # ── supported ──
    sub.add_parser("supported", help="Print the protocols this build supports")

    # ── old-tor ──
    old_p = sub.add_parser("old-tor", help="Protocols implied by an old release number")
    old_p.add_argument("release", help="Release or platform string, e.g. 0.2.7.5")

    # ── version ──
    sub.add_parser("version", help="Print version and exit")

    return parser


def _read_ballots(filepath: Optional[str]) -> List[str]:
    """Read one ballot per line from a file or stdin."""
    if filepath:
        with open(filepath, "r", encoding="utf-8") as f:
            text = f.read()
    else:
        if sys.stdin.isatty():
            print("protover: reading ballots from stdin (Ctrl-D to end)...",
                  file=sys.stderr)
        text = sys.stdin.read()
    return text.splitlines()


def _answer(yes: bool) -> int:
    print("yes" if yes else "no")
    return 0 if yes else 1


def _cmd_vote(args: argparse.Namespace) -> int:
    print(compute_vote(_read_ballots(args.input), args.threshold))
    return 0


def _cmd_canon(args: argparse.Namespace) -> int:
    if args.permissive:
        entry = ProtoEntry.parse_permissive(args.protocols)
    else:
        entry = ProtoEntry.parse(args.protocols)
    print(entry.to_string())
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    ok, unsupported = all_supported(args.protocols)
    if not ok:
        print(unsupported)
        return 1
    return 0


def _cmd_supports(args: argparse.Namespace) -> int:
    if args.or_later:
        return _answer(supports_version_or_later(args.protocols, args.name, args.version))
    return _answer(supports_version(args.protocols, args.name, args.version))


def main(argv: Optional[List[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG,
                            format="%(name)s: %(levelname)s: %(message)s")

    if args.command == "version":
        print(f"protover {__version__}")
        return

    try:
        if args.command == "vote":
            rc = _cmd_vote(args)
        elif args.command == "canon":
            rc = _cmd_canon(args)
        elif args.command == "check":
            rc = _cmd_check(args)
        elif args.command == "supports":
            rc = _cmd_supports(args)
        elif args.command == "here":
            rc = _answer(is_supported_here(args.name, args.version))
        elif args.command == "supported":
            print(get_supported_protocols())
            rc = 0
        else:
            print(compute_for_old_tor(args.release))
            rc = 0
    except ProtoverError as e:
        print(f"protover: error [{e.code}]: {e}", file=sys.stderr)
        sys.exit(2)
    except OSError as e:
        print(f"protover: cannot read input: {e}", file=sys.stderr)
        sys.exit(2)

    if rc:
        sys.exit(rc)


if __name__ == "__main__":
    main()
