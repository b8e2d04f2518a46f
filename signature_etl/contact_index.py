"""
Key -> contact mapping with first-writer-wins semantics.

One person is aliased under several keys (see names.build_keys). A key is
claimed by the first source that stores a valid value for it; later writes to
the same key are dropped, so provenance depends only on ingestion order.
Two different people can collide on a key. Collisions are recorded and logged,
not resolved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from difflib import SequenceMatcher
from typing import Callable, Dict, List, Optional, Set

from signature_etl.config import LOGGER_NAME
from signature_etl.detectors import cell_to_str, is_email, is_phone_number
from signature_etl.names import build_keys, display_name

KIND_EMAIL = "email"
KIND_PHONE = "phone"


@dataclass(frozen=True)
class ContactEntry:
    value: str
    source: str
    name: str = ""


def _clean_email(v: str) -> str:
    return v.strip().lower()


def _clean_phone(v: str) -> str:
    return v.strip()


_VALIDATORS: Dict[str, Callable[[str], bool]] = {
    KIND_EMAIL: is_email,
    KIND_PHONE: is_phone_number,
}

_CLEANERS: Dict[str, Callable[[str], str]] = {
    KIND_EMAIL: _clean_email,
    KIND_PHONE: _clean_phone,
}


class ContactIndex:
    def __init__(self, kind: str, logger: Optional[logging.Logger] = None):
        if kind not in _VALIDATORS:
            raise ValueError(f"Unknown contact kind: {kind!r}")
        self.kind = kind
        self.logger = logger or logging.getLogger(LOGGER_NAME)
        self._entries: Dict[str, ContactEntry] = {}
        # source -> lowercased display names stored from it
        self.indexed_names: Dict[str, Set[str]] = {}
        # key -> sources whose write lost to a different person's entry
        self.collisions: Dict[str, List[str]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def keys(self) -> List[str]:
        return list(self._entries.keys())

    def put(self, first: str, last: str, value, source: str) -> int:
        """
        Store `value` under every key of (first, last) not already claimed.
        Returns the number of keys newly claimed; 0 for invalid values or
        names that produce no keys.
        """
        raw = cell_to_str(value)
        if not raw or not _VALIDATORS[self.kind](raw):
            return 0

        keys = build_keys(first, last)
        if not keys:
            return 0

        cleaned = _CLEANERS[self.kind](raw)
        name = display_name(cell_to_str(first), cell_to_str(last))
        entry = ContactEntry(value=cleaned, source=source, name=name)

        added = 0
        for key in keys:
            existing = self._entries.get(key)
            if existing is None:
                self._entries[key] = entry
                added += 1
                continue
            if existing.value != cleaned and existing.name.lower() != name.lower():
                self.collisions.setdefault(key, []).append(source)
                self.logger.debug(
                    f"{self.kind} key collision '{key}': kept {existing.name!r} from {existing.source}, "
                    f"dropped {name!r} from {source}"
                )

        self.indexed_names.setdefault(source, set()).add(name.lower())
        return added

    def get(self, first: str, last: str) -> Optional[ContactEntry]:
        """First entry found walking the keys of (first, last) in priority order."""
        for key in build_keys(first, last):
            entry = self._entries.get(key)
            if entry is not None:
                return entry
        return None

    def get_fuzzy(self, first: str, last: str, cutoff: float) -> Optional[ContactEntry]:
        """
        Closest "x|y" key to this person's "first|last" key by
        SequenceMatcher ratio, if the best ratio reaches `cutoff`.
        Ties keep the earliest indexed key.
        """
        keys = build_keys(first, last)
        if not keys:
            return None
        target = keys[0]

        best_key: Optional[str] = None
        best_score = 0.0
        matcher = SequenceMatcher(b=target)
        for key in self._entries:
            if "|" not in key:
                continue
            matcher.set_seq1(key)
            if matcher.real_quick_ratio() < cutoff or matcher.quick_ratio() < cutoff:
                continue
            score = matcher.ratio()
            if score > best_score:
                best_key, best_score = key, score

        if best_key is None or best_score < cutoff:
            return None

        entry = self._entries[best_key]
        self.logger.debug(f"fuzzy {self.kind} match '{target}' -> '{best_key}' (ratio={best_score:.3f})")
        return ContactEntry(value=entry.value, source=f"{entry.source} (fuzzy)", name=entry.name)
