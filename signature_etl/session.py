"""
One generation run: roster + indices + reports, passed around explicitly.

Ingestion order matters (first writer wins in the indices): load the roster
first, then reference sheets, then contact text exports. Each file is read
and indexed as one step; a failing file is reported and skipped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from signature_etl.config import (
    FUZZY_CUTOFF,
    LOGGER_NAME,
    ORGANIZATION_LINE,
    SOURCE_HERO,
    SOURCE_REF,
    SOURCE_TXT,
)
from signature_etl.contact_index import KIND_EMAIL, KIND_PHONE, ContactIndex
from signature_etl.detectors import is_email, is_phone_number
from signature_etl.names import parse_combined_name
from signature_etl.parsers import (
    Employee,
    detect_reference_layout,
    parse_delimited_contacts,
    parse_tabular_reference,
    parse_tabular_roster,
    read_table,
)
from signature_etl.resolver import (
    SKIP_DUPLICATE_NAME,
    SKIP_WRITE_FAILED,
    ResolutionResult,
    SkipRecord,
    resolve_employee,
    skip_for_missing_email,
)
from signature_etl.signature import render_signature, signature_filename


# -------------
# Data classes
# -------------

@dataclass
class FileReport:
    file: str
    kind: str
    rows: int = 0
    names: int = 0
    emails: int = 0
    phones: int = 0
    # values that claimed at least one new key (the rest lost to earlier sources)
    emails_indexed: int = 0
    phones_indexed: int = 0
    warnings: str = ""
    errors: str = ""


@dataclass
class GenerationSummary:
    generated: int = 0
    skipped: List[SkipRecord] = field(default_factory=list)
    results: Dict[str, ResolutionResult] = field(default_factory=dict)
    written: List[Path] = field(default_factory=list)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)


# ----------
# Session
# ----------

class SignatureSession:
    def __init__(
        self,
        organization: str = ORGANIZATION_LINE,
        fuzzy_cutoff: Optional[float] = FUZZY_CUTOFF,
        column_aliases: Optional[Dict[str, List[str]]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.logger = logger or logging.getLogger(LOGGER_NAME)
        self.organization = organization
        self.fuzzy_cutoff = fuzzy_cutoff
        self.column_aliases = column_aliases
        self.email_index = ContactIndex(KIND_EMAIL, logger=self.logger)
        self.phone_index = ContactIndex(KIND_PHONE, logger=self.logger)
        self.roster: List[Employee] = []
        self.reports: List[FileReport] = []

    # ---- roster ----

    def add_roster_rows(self, header_row: Sequence[Any], data_rows: Sequence[Sequence[Any]], source: str) -> FileReport:
        rep = FileReport(file=source, kind="roster", rows=len(data_rows))
        employees = parse_tabular_roster(header_row, data_rows, self.column_aliases, logger=self.logger)
        if not employees:
            rep.warnings = "No employees with a first or last name."

        tag = f"{SOURCE_HERO}:{source}"
        for emp in employees:
            if is_email(emp.work_email):
                rep.emails += 1
                if self.email_index.put(emp.first_name, emp.last_name, emp.work_email, tag):
                    rep.emails_indexed += 1
            for v in (emp.cell_phone, emp.work_phone, emp.home_phone):
                if not is_phone_number(v):
                    continue
                rep.phones += 1
                if self.phone_index.put(emp.first_name, emp.last_name, v, tag):
                    rep.phones_indexed += 1

        self.roster = employees
        rep.names = len(employees)
        self.logger.info(f"Loaded {len(employees)} employees from roster {source}")
        self.reports.append(rep)
        return rep

    def load_roster(self, file_path: Path) -> FileReport:
        self.logger.info(f"Loading roster spreadsheet: {file_path.name}")
        try:
            header, rows = read_table(file_path)
        except Exception as e:
            self.logger.exception(f"{file_path.name}: failed to read roster")
            return self._failed(file_path.name, "roster", e)
        if not rows:
            self.logger.error(f"{file_path.name}: roster appears empty or has no data rows")
            rep = FileReport(file=file_path.name, kind="roster", errors="No data rows.")
            self.reports.append(rep)
            return rep
        return self.add_roster_rows(header, rows, file_path.name)

    # ---- reference sheets ----

    def add_reference_rows(self, header_row: Sequence[Any], data_rows: Sequence[Sequence[Any]], source: str) -> FileReport:
        rep = FileReport(file=source, kind="reference", rows=len(data_rows))
        layout = detect_reference_layout(header_row)
        if not layout.has_names:
            rep.warnings = "Could not identify name columns; scanned all columns."
            self.logger.warning(f"Could not identify name columns in {source}, will scan all columns")

        tag = f"{SOURCE_REF}:{source}"
        names = set()
        for first, last, value in parse_tabular_reference(header_row, data_rows, layout):
            if not first and not last:
                continue
            names.add(f"{first} {last}".strip().lower())
            if is_email(value):
                rep.emails += 1
                if self.email_index.put(first, last, value, tag):
                    rep.emails_indexed += 1
            if is_phone_number(value):
                rep.phones += 1
                if self.phone_index.put(first, last, value, tag):
                    rep.phones_indexed += 1

        rep.names = len(names)
        self.logger.info(
            f"Processed {source}: {rep.names} names, {rep.emails} emails, {rep.phones} phones "
            f"(newly indexed: {rep.emails_indexed} emails, {rep.phones_indexed} phones)"
        )
        self.reports.append(rep)
        return rep

    def load_reference(self, file_path: Path) -> FileReport:
        self.logger.info(f"Processing reference file: {file_path.name}")
        try:
            header, rows = read_table(file_path)
        except Exception as e:
            self.logger.exception(f"{file_path.name}: failed to read reference file")
            return self._failed(file_path.name, "reference", e)
        if not rows:
            self.logger.warning(f"{file_path.name} appears empty")
            rep = FileReport(file=file_path.name, kind="reference", warnings="Empty file.")
            self.reports.append(rep)
            return rep
        return self.add_reference_rows(header, rows, file_path.name)

    # ---- contact text exports ----

    def add_contacts_text(self, text: str, source: str) -> FileReport:
        rep = FileReport(file=source, kind="contacts")
        tag = f"{SOURCE_TXT}:{source}"
        names = set()
        for display, email in parse_delimited_contacts(text):
            rep.rows += 1
            if not display:
                continue
            first, last = parse_combined_name(display)
            if not first and not last:
                continue
            names.add(f"{first} {last}".strip().lower())
            if not is_email(email):
                continue
            rep.emails += 1
            if self.email_index.put(first, last, email, tag):
                rep.emails_indexed += 1

        rep.names = len(names)
        self.logger.info(f"Extracted {rep.emails} emails from {source} ({rep.emails_indexed} newly indexed)")
        self.reports.append(rep)
        return rep

    def load_contacts(self, file_path: Path) -> FileReport:
        self.logger.info(f"Processing TXT file: {file_path.name}")
        try:
            text = file_path.read_text(encoding="utf-8-sig", errors="replace")
        except Exception as e:
            self.logger.exception(f"{file_path.name}: failed to read contact export")
            return self._failed(file_path.name, "contacts", e)
        return self.add_contacts_text(text, file_path.name)

    def _failed(self, name: str, kind: str, e: Exception) -> FileReport:
        rep = FileReport(file=name, kind=kind, errors=f"{type(e).__name__}: {e}")
        self.reports.append(rep)
        return rep

    # ---- generation ----

    def resolve(self, employee: Employee) -> ResolutionResult:
        return resolve_employee(employee, self.email_index, self.phone_index, self.fuzzy_cutoff)

    def generate(self, out_folder: Path) -> GenerationSummary:
        """
        Write one signature file per employee with a resolvable email.
        Missing emails and failed writes are collected as skips; the batch
        always runs to the end.
        """
        summary = GenerationSummary()
        out_folder.mkdir(parents=True, exist_ok=True)

        self.logger.info("Starting signature generation...")
        self.logger.info(f"Email lookup has {len(self.email_index)} entries")
        self.logger.info(f"Phone lookup has {len(self.phone_index)} entries")
        for index in (self.email_index, self.phone_index):
            if index.collisions:
                self.logger.warning(
                    f"{len(index.collisions)} {index.kind} key(s) claimed by more than one person; "
                    f"earliest source kept"
                )

        written_names = set()
        for emp in self.roster:
            res = self.resolve(emp)
            filename = signature_filename(emp.first_name, emp.last_name)
            summary.results.setdefault(filename, res)

            if res.email is None:
                skip = skip_for_missing_email(emp)
                summary.skipped.append(skip)
                self.logger.warning(
                    f"SKIPPED: {emp.full_name} - no email found (searched keys: {', '.join(skip.attempted_keys)})"
                )
                continue

            if filename in written_names:
                # same LAST-FIRST as an earlier roster row; first one is kept
                self.logger.warning(f"SKIPPED: {emp.full_name} - {filename} already written in this run")
                summary.skipped.append(
                    SkipRecord(
                        first_name=emp.first_name,
                        last_name=emp.last_name,
                        reason=SKIP_DUPLICATE_NAME,
                        detail=filename,
                    )
                )
                continue

            text = render_signature(emp, res.email, res.phone, self.organization)
            out_path = out_folder / filename
            try:
                out_path.write_text(text, encoding="utf-8")
            except OSError as e:
                self.logger.error(f"ERROR writing {filename}: {e}")
                summary.skipped.append(
                    SkipRecord(
                        first_name=emp.first_name,
                        last_name=emp.last_name,
                        reason=SKIP_WRITE_FAILED,
                        detail=str(e),
                    )
                )
                continue

            written_names.add(filename)
            summary.generated += 1
            summary.written.append(out_path)
            self.logger.info(
                f"CREATED: {filename} | email from: {res.email_source} | phone from: {res.phone_source}"
            )

        self.logger.info(f"Generation complete: {summary.generated} created, {summary.skipped_count} skipped")
        self.log_indexed_names()
        return summary

    def log_indexed_names(self) -> None:
        sources: Dict[str, set] = {}
        for index in (self.email_index, self.phone_index):
            for src, names in index.indexed_names.items():
                sources.setdefault(src, set()).update(names)
        if not sources:
            return
        self.logger.info("--- Indexed names by source ---")
        for src, names in sources.items():
            self.logger.info(f"{src}: {len(names)} unique names")
