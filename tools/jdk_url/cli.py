#!/usr/bin/env python3
"""Print the JDK download URL for a version keyword (java8, java11, java17)."""

from __future__ import annotations

import argparse

from tools.jdk_url.versions import JDK_URLS, UnknownJavaVersionError, resolve_jdk_url


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Resolve the JDK tarball URL used to build CI images",
    )
    # Optional so that a missing keyword is reported like an unknown one.
    parser.add_argument(
        "keyword",
        nargs="?",
        default="",
        help=f"Java version keyword ({', '.join(JDK_URLS)})",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        url = resolve_jdk_url(args.keyword)
    except UnknownJavaVersionError as exc:
        print(exc)
        return 1
    print(url)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
