"""
Name normalization and lookup-key generation.

Every source (roster, reference sheets, contact exports) is indexed and
queried through the same key vocabulary, so two spellings of one person
("Smith, Jane" / "JANE SMITH" / "Jane Smith-Jones") land on shared keys.
"""

from __future__ import annotations

import re
from typing import Any, List, NamedTuple

from signature_etl.detectors import cell_to_str

_NOT_NAME_CHARS = re.compile(r"[^a-z\-']")
_WORD_SPLIT = re.compile(r"[\s\-]+")
_EDGE_QUOTES = re.compile(r"^[\"']|[\"']$")


class ParsedName(NamedTuple):
    first: str
    last: str


def normalize_part(raw: Any) -> str:
    """
    Lowercase, trim and keep only letters, hyphens and apostrophes.
    """
    t = cell_to_str(raw).lower().strip()
    t = _NOT_NAME_CHARS.sub("", t)
    return re.sub(r"\s+", "", t)


def build_keys(first: Any, last: Any) -> List[str]:
    """
    Lookup keys for a (first, last) pair, in lookup priority order:
      1) first|last
      2) last|first
      3) firstlast, lastfirst (no separator)
      4) one key pair per component of a hyphenated last, then first, name
    Keys are only produced when both parts survive normalization.
    """
    f = normalize_part(first)
    l = normalize_part(last)
    if not f or not l:
        return []

    keys = [f"{f}|{l}", f"{l}|{f}", f"{f}{l}", f"{l}{f}"]
    if "-" in l:
        for part in filter(None, l.split("-")):
            keys += [f"{f}|{part}", f"{part}|{f}"]
    if "-" in f:
        for part in filter(None, f.split("-")):
            keys += [f"{part}|{l}", f"{l}|{part}"]

    # ordered de-dup
    return list(dict.fromkeys(keys))


def parse_combined_name(raw: Any) -> ParsedName:
    """
    Best-effort split of a single name cell.

    "Last, First" -> comma convention. Otherwise whitespace tokens: one token is
    a first name only, two tokens are first/last, and for three or more the
    final token is the last name (middle tokens are dropped, so "Mary Anne
    Smith" yields last name "Smith").
    """
    name = cell_to_str(raw).strip()
    if not name:
        return ParsedName("", "")

    name = _EDGE_QUOTES.sub("", name).strip()

    if "," in name:
        parts = [p.strip() for p in name.split(",")]
        last = parts[0] if parts else ""
        first = parts[1] if len(parts) > 1 else ""
        return ParsedName(first, last)

    tokens = name.split()
    if len(tokens) >= 2:
        return ParsedName(tokens[0], tokens[-1])
    if len(tokens) == 1:
        return ParsedName(tokens[0], "")
    return ParsedName("", "")


def format_display_name(raw: Any) -> str:
    """Title-case each word; hyphenated input is re-joined with hyphens."""
    name = cell_to_str(raw).strip()
    if not name:
        return ""
    words = [w for w in _WORD_SPLIT.split(name.lower()) if w]
    joiner = "-" if "-" in name else " "
    return joiner.join(w[:1].upper() + w[1:] for w in words)


def display_name(first: str, last: str) -> str:
    return f"{first} {last}".strip()
