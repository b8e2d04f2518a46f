"""
Pre-generated signature lookup.

The remote table is an HTTP endpoint returning
    {"signatures": [{"key": "SMITH-JANE.txt", "content": "..."}]}
A local folder of generated files is the fallback. Both are keyed with the
same LAST-FIRST filename the generator writes.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional

import requests

from signature_etl.config import LOGGER_NAME, REMOTE_TIMEOUT, REQ_HEADERS
from signature_etl.signature import signature_filename


def signature_key(first: str, last: str) -> str:
    return signature_filename(first, last)


def _norm_key(key: str) -> str:
    k = (key or "").strip().upper()
    if not k.endswith(".TXT"):
        k += ".TXT"
    return k[: -len(".TXT")] + ".txt"


def fetch_signature_table(
    url: str,
    timeout: float = REMOTE_TIMEOUT,
    logger: Optional[logging.Logger] = None,
) -> Optional[Dict[str, str]]:
    """
    Returns key -> content, or None when the source is unavailable
    (network error, non-2xx, bad JSON or unexpected shape).
    """
    logger = logger or logging.getLogger(LOGGER_NAME)
    try:
        r = requests.get(url, headers=REQ_HEADERS, timeout=timeout)
        r.raise_for_status()
    except requests.RequestException as e:
        logger.warning(f"Remote signature table unavailable ({url}): {e}")
        return None

    # requests.JSONDecodeError subclasses RequestException
    try:
        payload = r.json()
    except ValueError as e:
        logger.warning(f"Remote signature table returned invalid JSON ({url}): {e}")
        return None

    items = payload.get("signatures") if isinstance(payload, dict) else None
    if not isinstance(items, list):
        logger.warning(f"Remote signature table has no 'signatures' list ({url})")
        return None

    table: Dict[str, str] = {}
    for item in items:
        if not isinstance(item, dict):
            continue
        key = item.get("key")
        content = item.get("content")
        if not key or content is None:
            continue
        table.setdefault(_norm_key(str(key)), str(content))

    logger.info(f"Remote signature table loaded: {len(table)} entries")
    return table


def load_signature_folder(folder: Path, logger: Optional[logging.Logger] = None) -> Optional[Dict[str, str]]:
    logger = logger or logging.getLogger(LOGGER_NAME)
    if not folder.is_dir():
        logger.warning(f"Signature folder not found: {folder.resolve()}")
        return None

    table: Dict[str, str] = {}
    for p in sorted(folder.glob("*.txt")):
        try:
            table[_norm_key(p.name)] = p.read_text(encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed reading {p.name}: {e}")
    return table


def lookup_signature(table: Optional[Dict[str, str]], first: str, last: str) -> Optional[str]:
    if not table:
        return None
    return table.get(signature_key(first, last))


def save_signature_record(
    url: str,
    record: Dict[str, str],
    timeout: float = REMOTE_TIMEOUT,
    logger: Optional[logging.Logger] = None,
) -> bool:
    """
    POST one generated signature's fields to the sheet endpoint.
    The body is JSON sent as text/plain, which is what the endpoint parses.
    Returns False (and logs) on any request failure.
    """
    logger = logger or logging.getLogger(LOGGER_NAME)
    headers = dict(REQ_HEADERS)
    headers["Content-Type"] = "text/plain"
    try:
        r = requests.post(url, data=json.dumps(record), headers=headers, timeout=timeout)
        r.raise_for_status()
    except requests.RequestException as e:
        logger.warning(f"Could not save signature record ({url}): {e}")
        return False

    logger.info(f"Saved signature record for {record.get('firstName', '')} {record.get('lastName', '')}")
    return True
