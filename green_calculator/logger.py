from __future__ import annotations

import csv
import io
import json
import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import config
from .engine import Failure, Success
from .session import CalculationForm

_log = logging.getLogger(__name__)

_SESSION_LOG_STATE: Dict[str, Dict[str, Any]] = {}


def safe_session_id(session_id: Optional[str]) -> str:
    if isinstance(session_id, str) and session_id and session_id.replace("-", "").isalnum():
        return session_id
    return "unknown"


def next_seq(session_id: str) -> Dict[str, Any]:
    state = _SESSION_LOG_STATE.setdefault(session_id, {"seq": 0})
    seq = state["seq"] + 1
    state["seq"] = seq
    ts = datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return {"seq": seq, "t_server_iso": ts}


def session_log_path(session_id: str) -> Path:
    return config.DATA_DIR / f"session_{safe_session_id(session_id)}.jsonl"


def append_jsonl(path: Path, record: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as fh:
        fh.write(json.dumps(record, ensure_ascii=False) + "\n")
        fh.flush()


def read_jsonl(path: Path) -> List[Dict[str, Any]]:
    if not path.exists():
        return []
    records: List[Dict[str, Any]] = []
    with path.open("r", encoding="utf-8") as fh:
        for line in fh:
            line = line.strip()
            if not line:
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError:
                _log.warning("Skipping malformed log line in %s", path)
    return records


def calculation_record(
    session_id: str,
    form: CalculationForm,
    result,
    *,
    step: float = config.STEP,
    started: Optional[float] = None,
) -> Dict[str, Any]:
    record: Dict[str, Any] = {
        "schema_version": config.SCHEMA_VERSION,
        "session_id": safe_session_id(session_id),
        "event": "calculate",
        "mode": form.mode.value,
        "field_p": form.field_p,
        "field_q": form.field_q,
        "curve_lower": form.curve_lower,
        "curve_upper": form.curve_upper,
        "x_min": form.x_min,
        "x_max": form.x_max,
        "step": step,
        "app_mode": config.APP_MODE,
        "elapsed_time_ms": None if started is None else max(int((time.monotonic() - started) * 1000), 0),
    }
    if isinstance(result, Success):
        record.update(status="success", result=result.formatted, error_kind=None)
    elif isinstance(result, Failure):
        record.update(status="failure", result=None, error_kind=result.kind.value)
    record.update(next_seq(record["session_id"]))
    return record


def log_calculation(session_id: str, record: Dict[str, Any]) -> None:
    try:
        append_jsonl(session_log_path(session_id), record)
    except OSError:
        _log.exception("Could not write calculation event for session %s", session_id)


def flatten_record_for_csv(record: Dict[str, Any]) -> Dict[str, Any]:
    flat = dict.fromkeys(config.SCHEMA_COLUMNS, None)
    for key, value in record.items():
        if key in flat:
            flat[key] = value
    return flat


def build_csv_content(records: List[Dict[str, Any]]) -> Optional[str]:
    if not records:
        return None
    columns = list(config.SCHEMA_COLUMNS)
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=columns, extrasaction="ignore")
    writer.writeheader()
    for record in records:
        writer.writerow(flatten_record_for_csv(record))
    return buffer.getvalue()
