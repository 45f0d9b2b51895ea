"""
CLI (Command Line Interface).

    omnivox <institution> <student_number> <password> [--newest N]

Logs into the institution's Omnivox portal, pulls documents, assignments
and calendar events, and prints them as tables. Warnings (pages that could
not be read) are listed at the end; only a failed login exits non-zero.
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from typing import Optional

from rich.console import Console

from omnivox.browser import Browser
from omnivox.config import load_settings
from omnivox.errors import AuthenticationError, UnknownInstitutionError
from omnivox.institutions import InstitutionRegistry, default_registry
from omnivox.pipeline import Pipeline
from omnivox.printer import StudentPrinter
from omnivox.student import Student


def _positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value!r}")
    return number


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="omnivox", description="Omnivox / Léa documents, assignments and calendar")
    p.add_argument("institution", type=str, help="Institution (e.g. champlain, maisonneuve)")
    p.add_argument("student_number", type=str, help="Student number (NoDA)")
    p.add_argument("password", type=str, help="Omnivox password")
    p.add_argument("--newest", "-n", type=int, default=None, help="Only show the N newest items per course")
    p.add_argument("--all", action="store_true", help="One table across all courses instead of one per course")
    p.add_argument("--timeout", type=_positive_float, default=None, help="Request timeout in seconds (default: 10)")
    p.add_argument("--insecure", action="store_true", help="Do not verify TLS certificates")
    p.add_argument("--institutions-file", type=str, default=None, help="JSON file registering more institutions")
    p.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return p


def _print_supported(console: Console, registry: InstitutionRegistry) -> None:
    console.print("The currently supported institutions are:")
    for key in registry.keys():
        console.print(f"\t- {registry.get(key).name}")


def main(argv: list[str] | None = None, console: Optional[Console] = None, browser: Optional[Browser] = None) -> None:
    """
    CLI entry point. Exits via SystemExit:
    0 = done (possibly with warnings), 1 = login failed, 2 = usage error.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    console = console or Console()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    if not args.student_number.strip() or not args.password:
        console.print("Student number and password are required.")
        raise SystemExit(2)

    registry = default_registry()
    if args.institutions_file:
        try:
            registry.load_file(args.institutions_file)
        except (OSError, ValueError, ImportError) as exc:
            console.print(f"Could not load {args.institutions_file}: {exc}", markup=False)
            raise SystemExit(2)

    try:
        institution = registry.get(args.institution)
    except UnknownInstitutionError:
        _print_supported(console, registry)
        raise SystemExit(2)

    try:
        settings = load_settings()
    except ValueError as exc:
        console.print(str(exc))
        raise SystemExit(2)
    if args.timeout is not None:
        settings = replace(settings, timeout=args.timeout)
    if args.insecure:
        settings = replace(settings, verify_tls=False)

    session, adapter = institution.build(browser=browser or Browser(settings))
    student = Student()
    pipeline = Pipeline(session, adapter, student)

    console.print("Logging in...")
    try:
        report = pipeline.run(args.student_number.strip(), args.password)
    except AuthenticationError as exc:
        console.print(f"Login failed: {exc}", markup=False)
        raise SystemExit(1)

    printer = StudentPrinter(student, console=console)
    if args.all:
        printer.print_all_documents(newest=args.newest)
        printer.print_all_assignments(newest=args.newest)
    else:
        printer.print_documents(newest=args.newest)
        printer.print_assignments(newest=args.newest)
    printer.print_calendar_events(soonest=args.newest)
    printer.print_whats_new(session.whats_new())

    if report.warnings:
        console.print(f"\n{len(report.warnings)} warning(s):")
        for w in report.warnings:
            console.print(f"- {w}", markup=False)

    raise SystemExit(0)
