"""
Plain-text signature block and its LAST-FIRST.txt filename.
"""

from __future__ import annotations

import re
import unicodedata

from signature_etl.config import ORGANIZATION_LINE
from signature_etl.parsers import Employee

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Z0-9'\-]")


def render_signature(
    employee: Employee,
    email: str,
    phone: str,
    organization: str = ORGANIZATION_LINE,
) -> str:
    lines = [
        employee.full_name,
        employee.job_title or "",
        organization,
        f"Phone | {phone or ''}",
        f"Email | {email}",
    ]
    return "\n".join(lines)


def _filename_part(part: str) -> str:
    t = unicodedata.normalize("NFKD", part or "").encode("ascii", "ignore").decode("ascii")
    t = re.sub(r"\s+", "-", t.strip().upper())
    return _UNSAFE_FILENAME_CHARS.sub("", t)


def signature_filename(first: str, last: str) -> str:
    return f"{_filename_part(last)}-{_filename_part(first)}.txt"
