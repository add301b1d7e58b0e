# -*- coding: utf-8 -*-
"""Scan — Pydantic models."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class ScannedFoodItem(BaseModel):
    name: str = Field(..., min_length=1)
    calories: float = Field(0.0, ge=0)
    protein: float = Field(0.0, ge=0)
    carbs: float = Field(0.0, ge=0)
    fat: float = Field(0.0, ge=0)
    healthBenefits: List[str] = []
    healthRisks: List[str] = []


class AnalyzeImageRequest(BaseModel):
    imageDataUrl: str = Field(..., min_length=16, description="data:image/...;base64,... or raw base64")


class AnalyzeImageResult(BaseModel):
    foodItems: List[ScannedFoodItem] = []
    totalCalories: float = 0.0
    totalProtein: float = 0.0
    totalCarbs: float = 0.0
    totalFat: float = 0.0


class AnalyzeImageResponse(AnalyzeImageResult):
    warnings: List[str] = []
    fallback: bool = False


class ImageUploadResponse(BaseModel):
    id: str
    image_url: str
    content_type: str
    size_bytes: int
    optimized: bool
    warnings: List[str] = []


class SaveScanRequest(BaseModel):
    result: AnalyzeImageResult
    image_url: Optional[str] = Field(None, max_length=2000)


class FoodScan(BaseModel):
    id: str
    image_url: Optional[str] = None
    total_calories: float = 0.0
    total_protein: float = 0.0
    total_carbs: float = 0.0
    total_fat: float = 0.0
    created_at: str
    items: List[ScannedFoodItem] = []


class FoodScansResponse(BaseModel):
    count: int
    scans: List[FoodScan] = []
