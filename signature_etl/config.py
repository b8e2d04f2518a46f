"""
Configuration and constants for signature_etl
"""

from typing import Dict, List

LOGGER_NAME = "signature_etl"
LOG_DIR = "logs"
LOG_FILE = "signature_etl.log"

# Output
DEFAULT_OUT_FOLDER = "EXPORTSIG"
DEFAULT_OUT_REPORT = "_signature_ingest_report.csv"
ORGANIZATION_LINE = "Wellbound Certified Home Health Agency"

# Input files
SPREADSHEET_EXTENSIONS = (".xlsx", ".xlsm")
CSV_EXTENSIONS = (".csv",)
TEXT_EXTENSIONS = (".txt",)

# Provenance prefixes
SOURCE_HERO = "HERO"
SOURCE_REF = "REF"
SOURCE_TXT = "TXT"
SOURCE_DIRECT = "direct"
SOURCE_NONE = "none"

# Roster (hero) column aliases; exact match first, then substring
ROSTER_COLUMN_ALIASES: Dict[str, List[str]] = {
    "first_name": ["first name", "firstname", "first"],
    "last_name": ["last name", "lastname", "last"],
    "job_title": ["primary job description", "job description", "job title", "title"],
    "cell_phone": ["cell phone", "cellphone", "cell", "mobile"],
    "work_phone": ["work phone", "workphone", "office phone", "phone"],
    "home_phone": ["home phone", "homephone", "home"],
    "work_email": ["work email", "workemail", "email"],
}

# Reference sheets: separate or combined name columns
REFERENCE_FIRST_ALIASES = ["first name", "firstname", "first"]
REFERENCE_LAST_ALIASES = ["last name", "lastname", "last"]
REFERENCE_COMBINED_ALIASES = [
    "therapist",
    "name",
    "employee",
    "staff",
    "full name",
    "fullname",
    "employee name",
]

# Fuzzy fallback on the "first|last" key (None disables)
FUZZY_CUTOFF = 0.9

# Remote pre-generated signature table
REMOTE_TIMEOUT = 10
REQ_HEADERS = {"Accept": "application/json"}

# Skipped names listed in the final summary
SKIPPED_SUMMARY_MAX = 30
