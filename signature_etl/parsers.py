"""
Record extraction from roster sheets, reference sheets and contact exports.

Tables are handled as a header row plus data rows of raw cells (whatever
pandas/openpyxl returned). Column layout is unknown up front: headers are
matched against alias lists, exact first, then substring.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

import pandas as pd

from signature_etl.config import (
    CSV_EXTENSIONS,
    LOGGER_NAME,
    REFERENCE_COMBINED_ALIASES,
    REFERENCE_FIRST_ALIASES,
    REFERENCE_LAST_ALIASES,
    ROSTER_COLUMN_ALIASES,
    SPREADSHEET_EXTENSIONS,
)
from signature_etl.detectors import cell_to_str, is_na_scalar, is_temporal
from signature_etl.names import format_display_name, parse_combined_name

BRACKETED_EMAIL = re.compile(r"<([^>]+@[^>]+)>")
QUOTED_NAME = re.compile(r'^"([^"]+)"')

Row = Sequence[Any]


# -------------
# Data classes
# -------------

@dataclass(frozen=True)
class Employee:
    first_name: str
    last_name: str
    job_title: str = ""
    cell_phone: str = ""
    work_phone: str = ""
    home_phone: str = ""
    work_email: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


# ------------------
# Table reading
# ------------------

def _frame_to_rows(raw: pd.DataFrame) -> Tuple[List[Any], List[List[Any]]]:
    raw = raw.dropna(axis=0, how="all")
    if raw.empty:
        return [], []
    rows = raw.values.tolist()
    return rows[0], rows[1:]


def read_table(file_path: Path) -> Tuple[List[Any], List[List[Any]]]:
    """
    Returns (header_row, data_rows) from the first sheet of an .xlsx/.xlsm
    workbook, or from a .csv file. Header detection is positional: the first
    non-empty row is the header.
    """
    suffix = file_path.suffix.lower()

    if suffix in SPREADSHEET_EXTENSIONS:
        raw = pd.read_excel(file_path, sheet_name=0, header=None, engine="openpyxl")
    elif suffix in CSV_EXTENSIONS:
        raw = pd.read_csv(file_path, header=None, dtype=str, keep_default_na=False, encoding="utf-8-sig")
        raw = raw.replace({"": pd.NA})
    else:
        raise ValueError(f"Unsupported extension: {suffix}")

    return _frame_to_rows(raw)


# ------------------
# Column resolution
# ------------------

def find_column_index(headers: Row, aliases: Sequence[str]) -> Optional[int]:
    """
    Case-insensitive exact match over aliases in order, then a substring pass
    in the same alias order. None when nothing matches.
    """
    norm = [cell_to_str(h).lower().strip() for h in headers]

    for alias in aliases:
        a = alias.lower()
        if a in norm:
            return norm.index(a)

    for alias in aliases:
        a = alias.lower()
        for i, h in enumerate(norm):
            if a in h:
                return i

    return None


def _cell(row: Row, idx: Optional[int]) -> Any:
    if idx is None or idx >= len(row):
        return None
    return row[idx]


def _text(row: Row, idx: Optional[int]) -> str:
    return cell_to_str(_cell(row, idx))


def _contact_text(row: Row, idx: Optional[int]) -> str:
    v = _cell(row, idx)
    return "" if is_temporal(v) else cell_to_str(v)


# ------------
# Roster
# ------------

def parse_tabular_roster(
    header_row: Row,
    data_rows: Sequence[Row],
    column_aliases: Optional[Dict[str, List[str]]] = None,
    logger: Optional[logging.Logger] = None,
) -> List[Employee]:
    logger = logger or logging.getLogger(LOGGER_NAME)
    aliases = column_aliases or ROSTER_COLUMN_ALIASES

    mapping: Dict[str, Optional[int]] = {
        field: find_column_index(header_row, names) for field, names in aliases.items()
    }
    logger.debug(f"roster column mapping: {mapping}")

    if mapping.get("first_name") is None or mapping.get("last_name") is None:
        logger.warning("Roster: could not find both First Name and Last Name columns")

    employees: List[Employee] = []
    for row in data_rows:
        first = _text(row, mapping.get("first_name"))
        last = _text(row, mapping.get("last_name"))
        if not first and not last:
            continue

        employees.append(
            Employee(
                first_name=format_display_name(first),
                last_name=format_display_name(last),
                job_title=_text(row, mapping.get("job_title")),
                cell_phone=_contact_text(row, mapping.get("cell_phone")),
                work_phone=_contact_text(row, mapping.get("work_phone")),
                home_phone=_contact_text(row, mapping.get("home_phone")),
                work_email=_contact_text(row, mapping.get("work_email")),
            )
        )

    return employees


# ------------
# Reference
# ------------

@dataclass(frozen=True)
class ReferenceLayout:
    first_idx: Optional[int]
    last_idx: Optional[int]
    combined_idx: Optional[int]

    @property
    def has_separate_names(self) -> bool:
        return self.first_idx is not None and self.last_idx is not None

    @property
    def has_combined_name(self) -> bool:
        return self.combined_idx is not None

    @property
    def has_names(self) -> bool:
        return self.has_separate_names or self.has_combined_name


def detect_reference_layout(header_row: Row) -> ReferenceLayout:
    return ReferenceLayout(
        first_idx=find_column_index(header_row, REFERENCE_FIRST_ALIASES),
        last_idx=find_column_index(header_row, REFERENCE_LAST_ALIASES),
        combined_idx=find_column_index(header_row, REFERENCE_COMBINED_ALIASES),
    )


def parse_tabular_reference(
    header_row: Row,
    data_rows: Sequence[Row],
    layout: Optional[ReferenceLayout] = None,
) -> Iterator[Tuple[str, str, str]]:
    """
    Yield (first, last, cell_text) for every non-empty cell of every row.

    Names come from separate first/last columns when both exist, else from a
    combined name column. With no name column at all, cells are still yielded
    with empty names; classification is left to the caller.
    """
    layout = layout or detect_reference_layout(header_row)

    for row in data_rows:
        first, last = "", ""
        if layout.has_separate_names:
            first = _text(row, layout.first_idx)
            last = _text(row, layout.last_idx)
        elif layout.has_combined_name:
            first, last = parse_combined_name(_cell(row, layout.combined_idx))

        for v in row:
            # date cells render as digit runs that pass the phone check
            if is_na_scalar(v) or is_temporal(v):
                continue
            t = cell_to_str(v)
            if t:
                yield first, last, t


# ---------------
# Contact exports
# ---------------

def parse_delimited_contacts(text: str) -> Iterator[Tuple[str, str]]:
    """
    Parse Outlook-style lists: '"Jane Smith" <jane@co.com>; <bob@co.com>;'

    Yields (display_name, email); display_name is "" for bare addresses.
    Segments without a bracketed address are ignored.
    """
    for segment in (text or "").split(";"):
        s = segment.strip()
        if not s:
            continue
        m = BRACKETED_EMAIL.search(s)
        if not m:
            continue
        email = m.group(1).strip()
        nm = QUOTED_NAME.match(s)
        yield (nm.group(1).strip() if nm else ""), email
