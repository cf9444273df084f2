"""
ecr-preflight CLI (flat-layout friendly).

Usage
-----
ecr-preflight login --registry 123456789012.dkr.ecr.eu-west-1.amazonaws.com --region eu-west-1
ecr-preflight check --no-remediate
ecr-preflight version
"""

from __future__ import annotations

import argparse
from typing import List, Optional

import runner
from version import ENGINE_NAME, ENGINE_VERSION


def cmd_login(args: argparse.Namespace) -> int:
    return runner.execute(args, login=True)


def cmd_check(args: argparse.Namespace) -> int:
    return runner.execute(args, login=False)


def cmd_version(args: argparse.Namespace) -> int:  # pylint: disable=unused-argument
    print(f"{ENGINE_NAME} {ENGINE_VERSION}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ecr-preflight", description="Registry login preflight")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp = sub.add_parser("login", help="Check, remediate, and log in unless cached credentials work.")
    runner.add_common_arguments(sp)
    sp.set_defaults(func=cmd_login)

    sp = sub.add_parser("check", help="Run the checks only; never log in.")
    runner.add_common_arguments(sp)
    sp.set_defaults(func=cmd_check)

    sp = sub.add_parser("version", help="Print the tool version.")
    sp.set_defaults(func=cmd_version)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
