# -*- coding: utf-8 -*-
"""Scan — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from fastapi.responses import FileResponse

from ..auth.security import get_current_user
from ..config import settings
from .imaging import prepare_image
from .models import (
    AnalyzeImageRequest,
    AnalyzeImageResponse,
    FoodScan,
    FoodScansResponse,
    ImageUploadResponse,
    SaveScanRequest,
)
from .storage import get_image_row, image_path, list_scans, save_scan, store_image
from .vision import analyze_food_image

router = APIRouter(prefix="/api/scan", tags=["Scan"])


@router.post("/analyze", response_model=AnalyzeImageResponse, summary="Estimate nutrition from a food photo")
def analyze(request: AnalyzeImageRequest, user: dict = Depends(get_current_user)):  # noqa: ARG001
    try:
        result, warnings, fallback = analyze_food_image(request.imageDataUrl)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return AnalyzeImageResponse(**result, warnings=warnings, fallback=fallback)


@router.post("/images", response_model=ImageUploadResponse, summary="Upload a food photo")
def upload_image(file: UploadFile = File(...), user: dict = Depends(get_current_user)):
    max_bytes = int(settings.max_upload_mb) * 1024 * 1024
    try:
        data = file.file.read(max_bytes + 1)
    finally:
        file.file.close()
    if not data:
        raise HTTPException(status_code=400, detail="Empty file")
    if len(data) > max_bytes:
        raise HTTPException(status_code=400, detail=f"File too large (> {settings.max_upload_mb} MB)")

    prepared = prepare_image(data, mime=file.content_type or "image/jpeg")
    row = store_image(user_id=user["id"], data=prepared.data, content_type=prepared.mime)
    return ImageUploadResponse(
        id=row["id"],
        image_url=f"/api/scan/images/{row['id']}",
        content_type=row["content_type"],
        size_bytes=row["size_bytes"],
        optimized=prepared.optimized,
        warnings=[prepared.warning] if prepared.warning else [],
    )


@router.get("/images/{image_id}", summary="Download a stored food photo")
def get_image(image_id: str, user: dict = Depends(get_current_user)):
    row = get_image_row(user_id=user["id"], image_id=image_id)
    if not row:
        raise HTTPException(status_code=404, detail="Image not found")
    path = image_path(row)
    if not path.exists():
        raise HTTPException(status_code=404, detail="File missing on disk")
    return FileResponse(path=str(path), media_type=row["content_type"])


@router.post("/scans", response_model=FoodScan, summary="Save a scan result")
def create_scan(request: SaveScanRequest, user: dict = Depends(get_current_user)):
    row = save_scan(user_id=user["id"], result=request.result.model_dump(), image_url=request.image_url)
    return FoodScan(**row)


@router.get("/scans", response_model=FoodScansResponse, summary="Recent scans (newest first)")
def recent_scans(
    limit: int = Query(default=10, ge=1, le=100),
    user: dict = Depends(get_current_user),
):
    rows = list_scans(user_id=user["id"], limit=limit)
    return FoodScansResponse(count=len(rows), scans=[FoodScan(**r) for r in rows])
