#!/usr/bin/env python3
"""
Utility: run a badge scan from the command line.

Usage:
  python scripts/scan_repositories.py github --user 42 --name "Ada" --email ada@example.org 1296269 123456
  python scripts/scan_repositories.py gitlab --user 42 --email ada@example.org 278964

Prints one line per skipped repository and waits for badge issuance to finish.
Reads provider and SMTP settings from the environment / .env like the API.
"""
from __future__ import annotations
import argparse
from dotenv import load_dotenv

from dei_badger.log import setup_logging
from dei_badger.store.db import init_db
from dei_badger.pipeline.scan import RepositoryScanner
from dei_badger.providers import get_provider


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Scan repositories for DEI.md and issue badges")
    parser.add_argument("provider", choices=["github", "gitlab"])
    parser.add_argument("repository_ids", nargs="*", help="Provider repository ids")
    parser.add_argument("--user", required=True, help="Id of the user owning the repositories")
    parser.add_argument("--name", default=None, help="Name used in mail greetings")
    parser.add_argument("--email", required=True, help="Where scan results are mailed")
    parser.add_argument("--log-level", default=None, help="Overrides LOG_LEVEL")
    args = parser.parse_args(argv)

    load_dotenv()
    setup_logging(args.log_level)
    init_db()

    with RepositoryScanner(get_provider(args.provider)) as scanner:
        results = scanner.scan_repositories(args.user, args.name, args.email, args.repository_ids)
        finished = scanner.wait_for_issuances()

    for line in results:
        print(line)
    failed = [f for f in finished if f.exception() is not None]
    print(f"{len(finished) - len(failed)} badge(s) issued, {len(failed)} failed, {len(results)} skipped")
    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
