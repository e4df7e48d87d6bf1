"""
utils/spreadsheet.py
-----------------
Upload checks and spreadsheet parsing for roster imports.
Rows come back as plain dicts keyed by the header text of row 1.
"""

import io
import logging

import pandas as pd

from utils.errors import UpstreamFailure, ValidationFailure

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = (
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "text/csv",
)

XLSX_MAGIC = b"PK\x03\x04"
XLS_MAGIC = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"


def read_upload(file, max_bytes):
    """Check type and size of an uploaded file and return its bytes."""
    if file is None or not file.filename:
        raise ValidationFailure("No file uploaded")

    if file.mimetype not in ALLOWED_CONTENT_TYPES:
        raise ValidationFailure("Only Excel and CSV files are allowed")

    data = file.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise ValidationFailure(f"File too large (max {max_bytes // (1024 * 1024)} MiB)")
    return data


def _read_frame(data):
    buffer = io.BytesIO(data)
    # Browsers label CSV files as application/vnd.ms-excel too, so sniff the bytes
    if data.startswith(XLSX_MAGIC):
        return pd.read_excel(buffer, sheet_name=0, dtype=str, engine="openpyxl")
    if data.startswith(XLS_MAGIC):
        return pd.read_excel(buffer, sheet_name=0, dtype=str, engine="xlrd")
    return pd.read_csv(buffer, dtype=str, encoding="utf-8-sig", skipinitialspace=True)


def parse_rows(data):
    """Return the first sheet (or the CSV) as a list of {header: text} rows."""
    if not data:
        return []
    try:
        df = _read_frame(data)
    except pd.errors.EmptyDataError:
        return []
    except Exception as e:
        logger.error("Error reading spreadsheet: %s", e)
        raise UpstreamFailure(f"Could not read spreadsheet: {e}") from e

    df.columns = [str(c) for c in df.columns]
    df = df.fillna("")

    rows = []
    for record in df.to_dict(orient="records"):
        rows.append({key: value.strip() if isinstance(value, str) else value for key, value in record.items()})
    return rows
