"""Spreadsheet input/output and console rendering of the run summary."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence

import pandas as pd

from errors import InputFileError
from messages import EntryStatus, SummaryEntry
from validator import InputRow


logger = logging.getLogger(__name__)

INPUT_COLUMNS = ["address", "amount", "type", "token"]
LOG_COLUMNS = ["address", "type", "status", "extra"]
RESULTS_SHEET = "Results"

_STATUS_LABELS = {
    EntryStatus.READY: "✅ Ready",
    EntryStatus.SENT: "✅ Sent",
    EntryStatus.FAILED: "❌ Failed",
    EntryStatus.INVALID_ENTRY: "❌ Invalid entry",
    EntryStatus.INVALID_NATIVE_TOKEN: "❌ Invalid native token",
    EntryStatus.INVALID_CW20_CONTRACT: "❌ Invalid CW20 contract",
    EntryStatus.UNKNOWN_TYPE: "❌ Unknown type",
}


def status_label(status: EntryStatus, max_amount: Optional[object] = None) -> str:
    if status is EntryStatus.AMOUNT_TOO_LARGE:
        return f"⚠️ Amount > {max_amount}" if max_amount is not None else "⚠️ Amount too large"
    return _STATUS_LABELS[status]


def _read_frame(path: Path) -> pd.DataFrame:
    if path.suffix.lower() in {".csv", ".txt"}:
        return pd.read_csv(path, dtype=str, keep_default_na=False, skipinitialspace=True)
    return pd.read_excel(path, sheet_name=0, dtype=str, keep_default_na=False)


def load_rows(filename: str) -> List[InputRow]:
    """Read the first sheet (or CSV body) into InputRows; absent columns become empty cells."""
    path = Path(filename)
    if not path.is_file():
        raise InputFileError(f"File not found: {filename}")
    try:
        df = _read_frame(path)
    except Exception as exc:
        raise InputFileError(f"Could not read {filename}: {exc}") from exc

    df.columns = [str(col).strip().lower() for col in df.columns]
    missing = [col for col in INPUT_COLUMNS if col not in df.columns]
    if missing:
        logger.warning("Input file %s has no column(s) %s; those cells are treated as empty.", filename, missing)
    df = df.reindex(columns=INPUT_COLUMNS).fillna("")

    rows = [InputRow.from_mapping(record) for record in df.to_dict(orient="records")]
    logger.info("Loaded %d row(s) from %s", len(rows), filename)
    return rows


def log_records(summary: Sequence[SummaryEntry], max_amount: Optional[object] = None) -> List[dict]:
    return [
        {
            "address": entry.recipient,
            "type": entry.type,
            "status": status_label(entry.status, max_amount),
            "extra": entry.tx_hash or entry.denom or entry.contract or "",
        }
        for entry in summary
    ]


def save_log(filename: str, summary: Sequence[SummaryEntry], max_amount: Optional[object] = None) -> str:
    """Write one row per summary entry and return the path written."""
    path = Path(filename)
    path.parent.mkdir(parents=True, exist_ok=True)
    df = pd.DataFrame(log_records(summary, max_amount), columns=LOG_COLUMNS)
    if path.suffix.lower() == ".csv":
        df.to_csv(path, index=False)
    else:
        df.to_excel(path, sheet_name=RESULTS_SHEET, index=False)
    logger.info("Results saved to %s", path)
    return str(path)


def render_summary(summary: Sequence[SummaryEntry], max_amount: Optional[object] = None) -> str:
    if not summary:
        return "(no rows)"
    df = pd.DataFrame(
        [
            {
                "Address": entry.recipient,
                "Type": entry.type,
                "Status": status_label(entry.status, max_amount),
                "Token": entry.token_ref,
            }
            for entry in summary
        ]
    )
    return df.to_string(index=False)
