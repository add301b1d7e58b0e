# -*- coding: utf-8 -*-
"""Bloodwork — Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class NutrientStatusLevel(str, Enum):
    optimal = "optimal"
    low = "low"
    very_low = "very_low"
    high = "high"
    very_high = "very_high"


class Biomarker(BaseModel):
    name: str
    value: Optional[float] = None
    unit: Optional[str] = None
    status: Optional[str] = None
    normal_range: Optional[str] = None
    recommendation: Optional[str] = None


class BloodworkAnalysis(BaseModel):
    biomarkers: List[Biomarker] = []
    summary_text: str = ""
    key_deficiencies: List[str] = []
    key_recommendations: List[str] = []


class BloodworkResult(BaseModel):
    id: str
    file_name: Optional[str] = None
    content_type: Optional[str] = None
    source_type: str
    notes: Optional[str] = None
    parsed_data: Optional[Dict[str, Any]] = None
    analysis_complete: bool = False
    uploaded_at: str


class BloodworkUploadResponse(BloodworkResult):
    analysis_source: Optional[str] = Field(None, description="'ai' or 'mock' when analysis ran")
    warnings: List[str] = []


class BloodworkListResponse(BaseModel):
    count: int
    results: List[BloodworkResult] = []


class ManualNutrientValue(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    value: float
    unit: str = Field("", max_length=40)


class ManualEntryRequest(BaseModel):
    nutrients: List[ManualNutrientValue] = Field(..., min_length=1)
    notes: Optional[str] = Field(None, max_length=2000)


class NutrientStatus(BaseModel):
    id: str
    bloodwork_id: Optional[str] = None
    nutrient_name: str
    current_value: Optional[float] = None
    unit: Optional[str] = None
    status: NutrientStatusLevel
    recommendations_applied: bool = False
    created_at: str


class NutrientStatusResponse(BaseModel):
    count: int
    statuses: List[NutrientStatus] = []


class DeficienciesResponse(BaseModel):
    deficiencies: List[str] = []


class TrendPoint(BaseModel):
    date: str
    value: Optional[float] = None
    unit: Optional[str] = None
    status: NutrientStatusLevel


class BiomarkerTrendResponse(BaseModel):
    nutrient_name: str
    points: List[TrendPoint] = []
