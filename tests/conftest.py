from pathlib import Path
from typing import Any, List

import pandas as pd
import pytest

from signature_etl.contact_index import KIND_EMAIL, KIND_PHONE, ContactIndex


@pytest.fixture
def email_index():
    return ContactIndex(KIND_EMAIL)


@pytest.fixture
def phone_index():
    return ContactIndex(KIND_PHONE)


def write_xlsx(path: Path, rows: List[List[Any]]) -> Path:
    pd.DataFrame(rows).to_excel(path, index=False, header=False, engine="openpyxl")
    return path
