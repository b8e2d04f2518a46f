"""
Command line entry point.

  signature-etl generate --roster hero.xlsx --reference a.xlsx b.csv --contacts list.txt
  signature-etl lookup --first Jane --last Smith --url https://.../exec
  signature-etl single --first Jane --last Smith --discipline RN --phone 5551234567 --email jane@co.com

Logs:
- Console + logs/signature_etl.log
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional

import pandas as pd

from signature_etl.config import (
    DEFAULT_OUT_FOLDER,
    DEFAULT_OUT_REPORT,
    FUZZY_CUTOFF,
    LOG_DIR,
    LOG_FILE,
    LOGGER_NAME,
    ORGANIZATION_LINE,
    REMOTE_TIMEOUT,
    SKIPPED_SUMMARY_MAX,
)
from signature_etl.detectors import format_phone_input, is_email
from signature_etl.parsers import Employee
from signature_etl.remote import (
    fetch_signature_table,
    load_signature_folder,
    lookup_signature,
    save_signature_record,
)
from signature_etl.session import FileReport, GenerationSummary, SignatureSession
from signature_etl.signature import render_signature


# ----------
# Logging
# ----------

def setup_logging(debug: bool) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    if logger.handlers:
        return logger

    os.makedirs(LOG_DIR, exist_ok=True)
    log_path = Path(LOG_DIR) / LOG_FILE

    fmt = logging.Formatter(
        "%(asctime)s | %(levelname)-7s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    fh = logging.FileHandler(log_path, encoding="utf-8")
    fh.setLevel(logging.DEBUG if debug else logging.INFO)
    fh.setFormatter(fmt)

    sh = logging.StreamHandler(sys.stdout)
    sh.setLevel(logging.DEBUG if debug else logging.INFO)
    sh.setFormatter(fmt)

    logger.addHandler(fh)
    logger.addHandler(sh)
    return logger


# ----------
# Reporting
# ----------

def write_report(reports: List[FileReport], out_report: Path, logger: logging.Logger) -> None:
    rep_df = pd.DataFrame([asdict(r) for r in reports])
    if rep_df.empty:
        rep_df = pd.DataFrame(columns=[f.name for f in FileReport.__dataclass_fields__.values()])
    rep_df.to_csv(out_report, index=False, encoding="utf-8-sig")
    logger.info(f"Wrote ingest report: {out_report.resolve()} rows={len(rep_df)}")


def log_skipped(summary: GenerationSummary, logger: logging.Logger) -> None:
    if not summary.skipped:
        return
    names = [s.full_name for s in summary.skipped]
    logger.warning(f"--- Skipped employees ({len(names)}) ---")
    if len(names) <= SKIPPED_SUMMARY_MAX:
        logger.warning(", ".join(names))
    else:
        logger.warning(
            f"{', '.join(names[:SKIPPED_SUMMARY_MAX])}... and {len(names) - SKIPPED_SUMMARY_MAX} more"
        )


# ----------
# Commands
# ----------

def run_generate(args: argparse.Namespace, logger: logging.Logger) -> int:
    roster = Path(args.roster)
    if not roster.exists():
        logger.error(f"Roster file not found: {roster.resolve()}")
        return 2

    fuzzy = None if args.no_fuzzy else args.fuzzy_cutoff
    session = SignatureSession(organization=args.organization, fuzzy_cutoff=fuzzy, logger=logger)

    session.load_roster(roster)
    if not session.roster:
        logger.error("No hero data loaded")
        write_report(session.reports, Path(args.out_report), logger)
        return 1

    for ref in args.reference:
        session.load_reference(Path(ref))
    logger.info(
        f"Reference files indexed: {len(session.email_index)} email entries, "
        f"{len(session.phone_index)} phone entries"
    )

    for txt in args.contacts:
        session.load_contacts(Path(txt))

    summary = session.generate(Path(args.out_folder))
    log_skipped(summary, logger)
    write_report(session.reports, Path(args.out_report), logger)
    return 0


def run_lookup(args: argparse.Namespace, logger: logging.Logger) -> int:
    first = (args.first or "").strip()
    last = (args.last or "").strip()
    if not first or not last:
        logger.error("Please enter both first and last name")
        return 2

    table = None
    if args.url:
        table = fetch_signature_table(args.url, timeout=args.timeout, logger=logger)
    if table is None:
        table = load_signature_folder(Path(args.folder), logger=logger)

    content = lookup_signature(table, first, last)
    if content is None:
        logger.error(f'Signature not found for "{first} {last}"')
        return 1

    print(content)
    return 0


def run_single(args: argparse.Namespace, logger: logging.Logger) -> int:
    first = (args.first or "").strip()
    last = (args.last or "").strip()
    email = (args.email or "").strip()
    if not first or not last:
        logger.error("Please enter both first and last name")
        return 2
    if not is_email(email):
        logger.error(f"Not a valid email address: {email!r}")
        return 2

    discipline = (args.discipline or "").strip()
    phone = format_phone_input(args.phone)
    employee = Employee(first_name=first, last_name=last, job_title=discipline)
    print(render_signature(employee, email, phone, args.organization))

    if args.save_url:
        record = {
            "firstName": first,
            "lastName": last,
            "discipline": discipline,
            "phone": phone,
            "email": email,
        }
        if not save_signature_record(args.save_url, record, timeout=args.timeout, logger=logger):
            logger.warning("Signature generated but could not save to sheet")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate plain-text email signatures from employee spreadsheets.")
    parser.add_argument("--debug", action="store_true", help="Enable DEBUG logging")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Resolve contacts and write one LAST-FIRST.txt per employee")
    gen.add_argument("--roster", required=True, help="Hero roster spreadsheet (.xlsx/.xlsm/.csv)")
    gen.add_argument("--reference", nargs="*", default=[], help="Reference spreadsheets scanned for emails/phones")
    gen.add_argument("--contacts", nargs="*", default=[], help='Contact exports: "Name" <email>; entries')
    gen.add_argument("--out-folder", default=DEFAULT_OUT_FOLDER, help=f"Output folder (default: {DEFAULT_OUT_FOLDER})")
    gen.add_argument("--out-report", default=DEFAULT_OUT_REPORT, help="Output ingest report CSV")
    gen.add_argument("--organization", default=ORGANIZATION_LINE, help="Organization line of the signature")
    gen.add_argument("--fuzzy-cutoff", type=float, default=FUZZY_CUTOFF, help="Fuzzy name match ratio (0-1)")
    gen.add_argument("--no-fuzzy", action="store_true", help="Disable fuzzy name matching")

    look = sub.add_parser("lookup", help="Find a pre-generated signature")
    look.add_argument("--first", required=True)
    look.add_argument("--last", required=True)
    look.add_argument("--url", default=None, help="Remote signature table endpoint")
    look.add_argument("--timeout", type=float, default=REMOTE_TIMEOUT, help="Remote fetch timeout (seconds)")
    look.add_argument("--folder", default=DEFAULT_OUT_FOLDER, help="Local folder of generated signatures")

    one = sub.add_parser("single", help="Render one signature from typed-in fields")
    one.add_argument("--first", required=True)
    one.add_argument("--last", required=True)
    one.add_argument("--email", required=True)
    one.add_argument("--discipline", default="", help="Job title line")
    one.add_argument("--phone", default="", help="Digits are kept (max 10) and dotted as DDD.DDD.DDDD")
    one.add_argument("--organization", default=ORGANIZATION_LINE, help="Organization line of the signature")
    one.add_argument("--save-url", default=None, help="Sheet endpoint to POST the record to")
    one.add_argument("--timeout", type=float, default=REMOTE_TIMEOUT, help="Save request timeout (seconds)")

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logger = setup_logging(args.debug)

    if args.command == "generate":
        code = run_generate(args, logger)
    elif args.command == "single":
        code = run_single(args, logger)
    else:
        code = run_lookup(args, logger)

    if code:
        sys.exit(code)


if __name__ == "__main__":
    main()
