# -*- coding: utf-8 -*-
"""Bloodwork — report files on disk + results/nutrient status in SQLite."""

from __future__ import annotations

import json
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

from fastapi import HTTPException, UploadFile

from ..app_db import db_conn
from ..config import settings


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _user_bloodwork_root(user_id: str) -> Path:
    return settings.data_root / "users" / user_id / "bloodwork"


def _safe_suffix(filename: str) -> str:
    suffix = Path(filename or "").suffix.lower()
    if not suffix or len(suffix) > 12:
        return ""
    if not re.fullmatch(r"\.[a-z0-9]+", suffix):
        return ""
    return suffix


def source_type_for(content_type: str, filename: str = "") -> str:
    ct = (content_type or "").lower()
    name = (filename or "").lower()
    if "pdf" in ct or name.endswith(".pdf"):
        return "pdf"
    if "csv" in ct or name.endswith(".csv"):
        return "csv"
    return "manual"


def _row_to_result(row: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(row)
    raw = out.get("parsed_data")
    try:
        out["parsed_data"] = json.loads(raw) if raw else None
    except ValueError:
        out["parsed_data"] = None
    out["analysis_complete"] = bool(out.get("analysis_complete"))
    return out


def create_result_from_upload(*, user_id: str, upload: UploadFile, notes: Optional[str]) -> Dict[str, Any]:
    result_id = str(uuid4())
    filename = upload.filename or f"bloodwork-{result_id}"
    content_type = upload.content_type or "application/octet-stream"

    root = _user_bloodwork_root(user_id)
    root.mkdir(parents=True, exist_ok=True)
    path = root / f"{result_id}{_safe_suffix(filename)}"

    size = 0
    max_bytes = int(settings.max_upload_mb) * 1024 * 1024
    try:
        with path.open("wb") as f:
            while True:
                chunk = upload.file.read(1024 * 256)
                if not chunk:
                    break
                size += len(chunk)
                if size > max_bytes:
                    raise HTTPException(status_code=400, detail=f"File too large (> {settings.max_upload_mb} MB)")
                f.write(chunk)
    except HTTPException:
        path.unlink(missing_ok=True)
        raise
    finally:
        upload.file.close()

    if size == 0:
        path.unlink(missing_ok=True)
        raise HTTPException(status_code=400, detail="Empty file")

    row = {
        "id": result_id,
        "user_id": user_id,
        "file_name": filename,
        "content_type": content_type,
        "stored_relpath": str(path.relative_to(settings.data_root)),
        "source_type": source_type_for(content_type, filename),
        "notes": notes,
        "parsed_data": None,
        "analysis_complete": 0,
        "uploaded_at": _utc_now(),
    }
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            """
            INSERT INTO bloodwork_results (
                id, user_id, file_name, content_type, stored_relpath, source_type,
                notes, parsed_data, analysis_complete, uploaded_at
            ) VALUES (
                :id, :user_id, :file_name, :content_type, :stored_relpath, :source_type,
                :notes, :parsed_data, :analysis_complete, :uploaded_at
            )
            """,
            row,
        )
    return _row_to_result(row)


def create_manual_result(*, user_id: str, nutrients: List[Dict[str, Any]], notes: Optional[str]) -> Dict[str, Any]:
    row = {
        "id": str(uuid4()),
        "user_id": user_id,
        "file_name": None,
        "content_type": None,
        "stored_relpath": None,
        "source_type": "manual",
        "notes": notes,
        "parsed_data": json.dumps({"nutrients": nutrients}, ensure_ascii=False),
        "analysis_complete": 1,
        "uploaded_at": _utc_now(),
    }
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            """
            INSERT INTO bloodwork_results (
                id, user_id, file_name, content_type, stored_relpath, source_type,
                notes, parsed_data, analysis_complete, uploaded_at
            ) VALUES (
                :id, :user_id, :file_name, :content_type, :stored_relpath, :source_type,
                :notes, :parsed_data, :analysis_complete, :uploaded_at
            )
            """,
            row,
        )
    return _row_to_result(row)


def result_file_path(row: Dict[str, Any]) -> Optional[Path]:
    rel = row.get("stored_relpath")
    return settings.data_root / rel if rel else None


def get_result(*, user_id: str, result_id: str) -> Optional[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute(
            "SELECT * FROM bloodwork_results WHERE id = ? AND user_id = ?",
            (result_id, user_id),
        ).fetchone()
        return _row_to_result(dict(row)) if row else None


def list_results(*, user_id: str) -> List[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        rows = conn.execute(
            "SELECT * FROM bloodwork_results WHERE user_id = ? ORDER BY uploaded_at DESC",
            (user_id,),
        ).fetchall()
        return [_row_to_result(dict(r)) for r in rows]


def delete_result(*, user_id: str, result_id: str) -> bool:
    row = get_result(user_id=user_id, result_id=result_id)
    if not row:
        return False
    with db_conn(settings.app_db_path) as conn:
        conn.execute("DELETE FROM bloodwork_results WHERE id = ? AND user_id = ?", (result_id, user_id))
    path = result_file_path(row)
    if path is not None:
        path.unlink(missing_ok=True)
    return True


def save_analysis(
    *,
    user_id: str,
    result_id: str,
    parsed_data: Dict[str, Any],
    statuses: List[Dict[str, Any]],
) -> Dict[str, Any]:
    """Store the analysis and replace this result's nutrient status rows."""
    now = _utc_now()
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            """
            UPDATE bloodwork_results SET parsed_data = ?, analysis_complete = 1
            WHERE id = ? AND user_id = ?
            """,
            (json.dumps(parsed_data, ensure_ascii=False), result_id, user_id),
        )
        conn.execute(
            "DELETE FROM user_nutrient_status WHERE bloodwork_id = ? AND user_id = ?",
            (result_id, user_id),
        )
        for status in statuses:
            conn.execute(
                """
                INSERT INTO user_nutrient_status (
                    id, user_id, bloodwork_id, nutrient_name, current_value, unit, status,
                    recommendations_applied, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, 0, ?)
                """,
                (
                    str(uuid4()),
                    user_id,
                    result_id,
                    status["nutrient_name"],
                    status.get("current_value"),
                    status.get("unit"),
                    status["status"],
                    now,
                ),
            )
    return get_result(user_id=user_id, result_id=result_id) or {}


def _row_to_status(row: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(row)
    out["recommendations_applied"] = bool(out.get("recommendations_applied"))
    return out


def _latest_analyzed_id(conn, user_id: str) -> Optional[str]:
    row = conn.execute(
        """
        SELECT b.id FROM bloodwork_results b
        WHERE b.user_id = ? AND EXISTS (
            SELECT 1 FROM user_nutrient_status s WHERE s.bloodwork_id = b.id
        )
        ORDER BY b.uploaded_at DESC LIMIT 1
        """,
        (user_id,),
    ).fetchone()
    return row["id"] if row else None


def list_nutrient_status(*, user_id: str, latest_only: bool = True) -> List[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        if latest_only:
            latest_id = _latest_analyzed_id(conn, user_id)
            if not latest_id:
                return []
            rows = conn.execute(
                """
                SELECT * FROM user_nutrient_status
                WHERE user_id = ? AND bloodwork_id = ?
                ORDER BY nutrient_name ASC
                """,
                (user_id, latest_id),
            ).fetchall()
        else:
            rows = conn.execute(
                "SELECT * FROM user_nutrient_status WHERE user_id = ? ORDER BY created_at DESC",
                (user_id,),
            ).fetchall()
        return [_row_to_status(dict(r)) for r in rows]


def list_deficiencies(*, user_id: str) -> List[str]:
    return [
        s["nutrient_name"]
        for s in list_nutrient_status(user_id=user_id, latest_only=True)
        if s["status"] in ("low", "very_low")
    ]


def biomarker_trend(*, user_id: str, nutrient_name: str) -> List[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        rows = conn.execute(
            """
            SELECT s.current_value, s.unit, s.status, b.uploaded_at
            FROM user_nutrient_status s
            JOIN bloodwork_results b ON b.id = s.bloodwork_id
            WHERE s.user_id = ? AND lower(s.nutrient_name) = lower(?)
            ORDER BY b.uploaded_at ASC
            """,
            (user_id, nutrient_name.strip()),
        ).fetchall()
    return [
        {"date": r["uploaded_at"], "value": r["current_value"], "unit": r["unit"], "status": r["status"]}
        for r in rows
    ]
