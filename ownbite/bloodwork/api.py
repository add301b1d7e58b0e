# -*- coding: utf-8 -*-
"""Bloodwork — API endpoints."""

from __future__ import annotations

import logging
from typing import Any, Dict, Tuple

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile

from ..auth.security import get_current_user
from ..llm import AIRequestError
from .analysis import analyze_report, extract_report_text, grade_value, normalize_status
from .models import (
    BiomarkerTrendResponse,
    BloodworkListResponse,
    BloodworkResult,
    BloodworkUploadResponse,
    DeficienciesResponse,
    ManualEntryRequest,
    NutrientStatus,
    NutrientStatusResponse,
    TrendPoint,
)
from .storage import (
    biomarker_trend,
    create_manual_result,
    create_result_from_upload,
    delete_result,
    get_result,
    list_deficiencies,
    list_nutrient_status,
    list_results,
    result_file_path,
    save_analysis,
)

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/bloodwork", tags=["Bloodwork"])


def _run_analysis(user_id: str, row: Dict[str, Any]) -> Tuple[Dict[str, Any], str]:
    report_text = ""
    path = result_file_path(row)
    if path is not None and path.exists():
        try:
            report_text = extract_report_text(
                path,
                content_type=(row.get("content_type") or "").lower(),
                filename=row.get("file_name") or "",
            )
        except Exception:
            log.warning("Could not extract text from bloodwork %s", row["id"], exc_info=True)

    analysis, source = analyze_report(report_text)
    statuses = [
        {
            "nutrient_name": b["name"],
            "current_value": b.get("value"),
            "unit": b.get("unit"),
            "status": normalize_status(b.get("status")),
        }
        for b in analysis["biomarkers"]
    ]
    updated = save_analysis(user_id=user_id, result_id=row["id"], parsed_data=analysis, statuses=statuses)
    return updated, source


@router.post("/upload", response_model=BloodworkUploadResponse, summary="Upload a bloodwork report and analyze it")
def upload(
    notes: str | None = Form(default=None),
    file: UploadFile = File(...),
    user: dict = Depends(get_current_user),
):
    row = create_result_from_upload(user_id=user["id"], upload=file, notes=notes)
    try:
        row, source = _run_analysis(user["id"], row)
    except AIRequestError as exc:
        log.warning("Bloodwork analysis failed for %s", row["id"], exc_info=True)
        return BloodworkUploadResponse(**row, warnings=[f"Analysis failed: {exc}"])
    return BloodworkUploadResponse(**row, analysis_source=source)


@router.post("/manual", response_model=BloodworkResult, summary="Record nutrient values manually")
def add_manual_values(request: ManualEntryRequest, user: dict = Depends(get_current_user)):
    nutrients = [n.model_dump() for n in request.nutrients]
    row = create_manual_result(user_id=user["id"], nutrients=nutrients, notes=request.notes)
    statuses = [
        {
            "nutrient_name": n["name"],
            "current_value": n["value"],
            "unit": n["unit"],
            "status": grade_value(n["name"], n["value"]),
        }
        for n in nutrients
    ]
    row = save_analysis(user_id=user["id"], result_id=row["id"], parsed_data={"nutrients": nutrients}, statuses=statuses)
    return BloodworkResult(**row)


@router.post("/{result_id}/analyze", response_model=BloodworkUploadResponse, summary="(Re)run the analysis")
def analyze(result_id: str, user: dict = Depends(get_current_user)):
    row = get_result(user_id=user["id"], result_id=result_id)
    if not row:
        raise HTTPException(status_code=404, detail="Bloodwork result not found")
    try:
        row, source = _run_analysis(user["id"], row)
    except AIRequestError as exc:
        raise HTTPException(status_code=502, detail=f"Bloodwork analysis failed: {exc}") from exc
    return BloodworkUploadResponse(**row, analysis_source=source)


@router.get("", response_model=BloodworkListResponse, summary="List my bloodwork results")
def list_my_results(user: dict = Depends(get_current_user)):
    rows = list_results(user_id=user["id"])
    return BloodworkListResponse(count=len(rows), results=[BloodworkResult(**r) for r in rows])


@router.get("/status", response_model=NutrientStatusResponse, summary="Nutrient status")
def nutrient_status(
    latest_only: bool = Query(default=True),
    user: dict = Depends(get_current_user),
):
    rows = list_nutrient_status(user_id=user["id"], latest_only=latest_only)
    return NutrientStatusResponse(count=len(rows), statuses=[NutrientStatus(**r) for r in rows])


@router.get("/deficiencies", response_model=DeficienciesResponse, summary="Deficient nutrients from the latest analysis")
def deficiencies(user: dict = Depends(get_current_user)):
    return DeficienciesResponse(deficiencies=list_deficiencies(user_id=user["id"]))


@router.get("/trends/{nutrient_name}", response_model=BiomarkerTrendResponse, summary="Biomarker values over time")
def trend(nutrient_name: str, user: dict = Depends(get_current_user)):
    points = biomarker_trend(user_id=user["id"], nutrient_name=nutrient_name)
    return BiomarkerTrendResponse(nutrient_name=nutrient_name, points=[TrendPoint(**p) for p in points])


@router.get("/{result_id}", response_model=BloodworkResult, summary="Get one bloodwork result")
def read_result(result_id: str, user: dict = Depends(get_current_user)):
    row = get_result(user_id=user["id"], result_id=result_id)
    if not row:
        raise HTTPException(status_code=404, detail="Bloodwork result not found")
    return BloodworkResult(**row)


@router.delete("/{result_id}", summary="Delete a bloodwork result")
def remove_result(result_id: str, user: dict = Depends(get_current_user)):
    if not delete_result(user_id=user["id"], result_id=result_id):
        raise HTTPException(status_code=404, detail="Bloodwork result not found")
    return {"status": "ok"}
