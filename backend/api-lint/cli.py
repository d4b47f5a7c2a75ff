from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional, Sequence

import config
from adapters.java_adapter import JavaAdapter
from checks.api_checks import ApiChecks
from checks.diagnostics import Reporter
from checks.permission_report import PermissionReport


def collect_java_files(paths: Sequence[str]) -> List[str]:
    """Expand directories recursively; keep explicit files as given."""
    files: List[str] = []
    for p in paths:
        if os.path.isdir(p):
            for root, _, names in os.walk(p):
                for name in names:
                    if name.endswith(".java"):
                        files.append(os.path.join(root, name))
        else:
            files.append(p)
    return sorted(files)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="api-lint",
        description="Check Java API docs for TODOs, undeclared @IntDef / nullness, "
                    "and extract @RequiresPermission metadata.",
    )
    parser.add_argument("paths", nargs="+", help=".java files or directories")
    parser.add_argument("--report", default=None, help=f"report file (default: {config.REPORT_FILE})")
    parser.add_argument("--no-report", action="store_true", help="do not write the report file")
    parser.add_argument("--include", action="append", default=None, metavar="PREFIX",
                        help="package prefix to check (repeatable)")
    parser.add_argument("--exclude", action="append", default=None, metavar="PREFIX",
                        help="package prefix to skip (repeatable)")
    parser.add_argument("--strict", action="store_true", help="exit 1 when any diagnostic is reported")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    java_files = collect_java_files(args.paths)
    print(f"[API LINT] Java files detected ({len(java_files)})")
    if not java_files:
        print("[API LINT] No .java files found.")

    codebase = JavaAdapter().build_codebase_for_files(java_files)
    for err in codebase.parse_errors:
        print(f"{err['file']}: error: {err['error']}", file=sys.stderr)

    reporter = Reporter()
    report = PermissionReport()
    report.start()
    ApiChecks(
        reporter,
        report,
        include_prefixes=args.include,
        exclude_prefixes=args.exclude,
    ).check(codebase)

    for diag in reporter.diagnostics:
        print(diag.render())
    print(f"[API LINT] {reporter.count()} issue(s) found")

    if not args.no_report:
        report.end(Path(args.report) if args.report else None)

    if args.strict and reporter.count():
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
