"""
Pick the best email and phone for a roster employee.

Email:  direct roster field -> email index (ordered keys) -> fuzzy key match
Phone:  cell -> work -> home (roster fields) -> phone index -> fuzzy key match

An employee without an email is skipped; a missing phone only leaves the
phone line empty.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from signature_etl.config import FUZZY_CUTOFF, SOURCE_DIRECT, SOURCE_NONE
from signature_etl.contact_index import ContactEntry, ContactIndex
from signature_etl.detectors import format_phone_number, is_email, is_phone_number
from signature_etl.names import build_keys
from signature_etl.parsers import Employee

SKIP_NO_EMAIL = "no_email"
SKIP_WRITE_FAILED = "write_failed"
SKIP_DUPLICATE_NAME = "duplicate_name"

PHONE_FIELDS = ("cell_phone", "work_phone", "home_phone")


@dataclass(frozen=True)
class ResolutionResult:
    email: Optional[str]
    email_source: str
    phone: str
    phone_source: str


@dataclass
class SkipRecord:
    first_name: str
    last_name: str
    reason: str
    attempted_keys: List[str] = field(default_factory=list)
    detail: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


def _lookup(
    index: ContactIndex,
    first: str,
    last: str,
    fuzzy_cutoff: Optional[float],
) -> Optional[ContactEntry]:
    found = index.get(first, last)
    if found is None and fuzzy_cutoff is not None:
        found = index.get_fuzzy(first, last, fuzzy_cutoff)
    return found


def resolve_email(
    employee: Employee,
    index: ContactIndex,
    fuzzy_cutoff: Optional[float] = FUZZY_CUTOFF,
) -> Optional[ContactEntry]:
    if is_email(employee.work_email):
        return ContactEntry(value=employee.work_email.strip(), source=SOURCE_DIRECT, name=employee.full_name)
    return _lookup(index, employee.first_name, employee.last_name, fuzzy_cutoff)


def resolve_phone(
    employee: Employee,
    index: ContactIndex,
    fuzzy_cutoff: Optional[float] = FUZZY_CUTOFF,
) -> ContactEntry:
    for name in PHONE_FIELDS:
        v = getattr(employee, name)
        if is_phone_number(v):
            return ContactEntry(value=format_phone_number(v), source=name, name=employee.full_name)

    found = _lookup(index, employee.first_name, employee.last_name, fuzzy_cutoff)
    if found is not None:
        return ContactEntry(value=format_phone_number(found.value), source=found.source, name=found.name)

    return ContactEntry(value="", source=SOURCE_NONE)


def resolve_employee(
    employee: Employee,
    email_index: ContactIndex,
    phone_index: ContactIndex,
    fuzzy_cutoff: Optional[float] = FUZZY_CUTOFF,
) -> ResolutionResult:
    email = resolve_email(employee, email_index, fuzzy_cutoff)
    phone = resolve_phone(employee, phone_index, fuzzy_cutoff)
    return ResolutionResult(
        email=email.value if email else None,
        email_source=email.source if email else SOURCE_NONE,
        phone=phone.value,
        phone_source=phone.source,
    )


def skip_for_missing_email(employee: Employee) -> SkipRecord:
    return SkipRecord(
        first_name=employee.first_name,
        last_name=employee.last_name,
        reason=SKIP_NO_EMAIL,
        attempted_keys=build_keys(employee.first_name, employee.last_name),
    )
