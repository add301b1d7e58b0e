# -*- coding: utf-8 -*-
"""Reminders — Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class ReminderType(str, Enum):
    goal = "goal"
    reminder = "reminder"


class ReminderPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class ReminderFilter(str, Enum):
    all = "all"
    active = "active"
    completed = "completed"


class ReminderCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    due_date: Optional[str] = None
    type: ReminderType = ReminderType.reminder
    priority: ReminderPriority = ReminderPriority.medium
    is_completed: bool = False


class ReminderUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    due_date: Optional[str] = None
    type: Optional[ReminderType] = None
    priority: Optional[ReminderPriority] = None
    is_completed: Optional[bool] = None


class Reminder(BaseModel):
    id: str
    user_id: str
    title: str
    description: Optional[str] = None
    due_date: Optional[str] = None
    type: ReminderType
    priority: ReminderPriority
    is_completed: bool = False
    created_at: str


class RemindersResponse(BaseModel):
    count: int
    reminders: List[Reminder] = []
