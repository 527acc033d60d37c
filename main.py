#!/usr/bin/env python3
"""
BLITZ 45 Dias - Main Entry Point.

Usage:
    python main.py register <name> --code <barcode> --lot <lot> --expiry <YYYY-MM-DD> [--yes | --no]
    python main.py report [--severity critical|warning|none] [--json]
    python main.py summary
    python main.py export [--output <dir>]
    python main.py clear [--yes]
    python main.py serve [--host <host>] [--port <port>]

Global options:
    --storage <file>              JSON storage file (default: data/storage.json)
    --mode snapshot|live          Day count used by reports
"""

import argparse
import json
import logging
import sys

from dotenv import load_dotenv
load_dotenv()

from blitz.notifications import ConsoleNotifier
from blitz.registration import RegistrationFlow, RegistrationForm, RegistrationOutcome
from blitz.report import EMPTY_REPORT_MESSAGE, CLEARED_MESSAGE, NothingToExportError, ReportGenerator, UrgencyMode
from blitz.severity import Severity
from blitz.store import JsonFileStorage, RecordStore
from config import settings

logger = logging.getLogger(__name__)


# ============================================================
# Helpers
# ============================================================

def _get_store(args):
    return RecordStore(JsonFileStorage(args.storage), key=settings.STORAGE_KEY)


def _get_report(args):
    return ReportGenerator(_get_store(args), urgency_mode=args.mode)


def _confirmer(assume):
    """Build a confirmation callback; *assume* short-circuits the prompt."""
    def confirm(message):
        if assume is not None:
            return assume
        print(message)
        try:
            reply = input("[s/N] ")
        except EOFError:
            return False
        return reply.strip().lower() in ("s", "sim", "y", "yes")
    return confirm


# ============================================================
# Commands
# ============================================================

def cmd_register(args):
    """Register a product."""
    flow = RegistrationFlow(_get_store(args), ConsoleNotifier())
    form = RegistrationForm(
        name=args.name.strip(),
        code=args.code.strip(),
        lot=args.lot.strip(),
        expiration_date=args.expiry.strip(),
    )
    result = flow.submit(form, confirm=_confirmer(args.assume))

    if result.outcome == RegistrationOutcome.REGISTERED:
        print(f"  Dias restantes: {result.days_remaining}")
        return 0
    if result.outcome in (RegistrationOutcome.INVALID, RegistrationOutcome.STORAGE_ERROR):
        return 1
    return 2


def cmd_report(args):
    """Print the report table, most urgent first."""
    rows = _get_report(args).rows()
    if args.severity:
        wanted = Severity(args.severity)
        rows = [r for r in rows if r.severity == wanted]

    if args.json:
        print(json.dumps([r.to_dict() for r in rows], indent=2, ensure_ascii=False))
        return 0

    if not rows:
        print(EMPTY_REPORT_MESSAGE)
        return 0

    print(f"\n{'':3s} {'Produto':30s} {'Código':16s} {'Lote':12s} {'Vencimento':11s} {'Dias':>5s}  {'Registrado em':20s}")
    print("-" * 106)
    for row in rows:
        flag = {Severity.CRITICAL: "!!!", Severity.WARNING: "!"}.get(row.severity, "")
        r = row.record
        print(
            f"{flag:3s} {r.name:30s} {r.code:16s} {r.lot:12s} "
            f"{row.expiration_display:11s} {row.days_remaining:5d}  {row.registered_display:20s}"
        )
    print(f"\nTotal: {len(rows)} produto(s)")
    return 0


def cmd_summary(args):
    """Print counts per severity tier."""
    print(json.dumps(_get_report(args).summary(), indent=2, ensure_ascii=False))
    return 0


def cmd_export(args):
    """Write the CSV export to a directory."""
    try:
        path = _get_report(args).write_csv(args.output)
    except NothingToExportError as exc:
        print(f"[ERRO] {exc}")
        return 1
    print(f"Relatório salvo em: {path}")
    return 0


def cmd_clear(args):
    """Delete every stored record."""
    if _get_report(args).clear_all(_confirmer(True if args.yes else None)):
        print(CLEARED_MESSAGE)
        return 0
    return 2


def cmd_serve(args):
    """Run the web dashboard."""
    from web import create_app
    app = create_app({"BLITZ_STORAGE_PATH": args.storage, "BLITZ_URGENCY_MODE": args.mode})
    app.run(host=args.host, port=args.port)
    return 0


# ============================================================
# Parser
# ============================================================

def build_parser():
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="BLITZ 45 Dias - product expiry tracker"
    )
    parser.add_argument("--storage", default=str(settings.STORAGE_PATH), help="JSON storage file")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in UrgencyMode],
        default=settings.URGENCY_MODE,
        help="Day count used by reports",
    )
    parser.add_argument("--log-level", default=settings.LOG_LEVEL, help="Logging level")
    subparsers = parser.add_subparsers(dest="command", help="Command")

    reg = subparsers.add_parser("register", help="Register a product")
    reg.add_argument("name", help="Product name")
    reg.add_argument("--code", required=True, help="Barcode")
    reg.add_argument("--lot", required=True, help="Lot")
    reg.add_argument("--expiry", required=True, help="Expiration date (YYYY-MM-DD or DD/MM/YYYY)")
    answer = reg.add_mutually_exclusive_group()
    answer.add_argument("--yes", dest="assume", action="store_const", const=True,
                        help="Register without asking when outside the criterion")
    answer.add_argument("--no", dest="assume", action="store_const", const=False,
                        help="Decline automatically when outside the criterion")
    reg.set_defaults(func=cmd_register, assume=None)

    rep = subparsers.add_parser("report", help="Show the report")
    rep.add_argument("--severity", choices=[s.value for s in Severity])
    rep.add_argument("--json", action="store_true", help="Print JSON")
    rep.set_defaults(func=cmd_report)

    summ = subparsers.add_parser("summary", help="Show counts per severity")
    summ.set_defaults(func=cmd_summary)

    exp = subparsers.add_parser("export", help="Export the report as CSV")
    exp.add_argument("--output", default=str(settings.EXPORT_DIR), help="Output directory")
    exp.set_defaults(func=cmd_export)

    clr = subparsers.add_parser("clear", help="Delete every record")
    clr.add_argument("--yes", action="store_true", help="Do not ask for confirmation")
    clr.set_defaults(func=cmd_clear)

    srv = subparsers.add_parser("serve", help="Run the web dashboard")
    srv.add_argument("--host", default=settings.WEB_HOST)
    srv.add_argument("--port", type=int, default=settings.WEB_PORT)
    srv.set_defaults(func=cmd_serve)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format=settings.LOG_FORMAT)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
