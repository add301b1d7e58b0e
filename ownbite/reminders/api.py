# -*- coding: utf-8 -*-
"""Reminders — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from ..auth.security import get_current_user
from .models import Reminder, ReminderCreateRequest, ReminderFilter, RemindersResponse, ReminderUpdateRequest
from .storage import add_reminder, delete_reminder, list_reminders, update_reminder

router = APIRouter(prefix="/api/reminders", tags=["Reminders"])


@router.get("", response_model=RemindersResponse, summary="List my reminders")
def read_reminders(
    status_filter: ReminderFilter = Query(ReminderFilter.all, alias="filter"),
    user: dict = Depends(get_current_user),
):
    rows = list_reminders(user_id=user["id"], status_filter=status_filter.value)
    return RemindersResponse(count=len(rows), reminders=[Reminder(**r) for r in rows])


@router.post("", response_model=Reminder, summary="Add a reminder")
def new_reminder(request: ReminderCreateRequest, user: dict = Depends(get_current_user)):
    return Reminder(**add_reminder(user_id=user["id"], reminder=request.model_dump(mode="json")))


@router.patch("/{reminder_id}", response_model=Reminder, summary="Update a reminder")
def patch_reminder(reminder_id: str, request: ReminderUpdateRequest, user: dict = Depends(get_current_user)):
    row = update_reminder(
        user_id=user["id"],
        reminder_id=reminder_id,
        updates=request.model_dump(mode="json", exclude_unset=True),
    )
    if not row:
        raise HTTPException(status_code=404, detail="Reminder not found")
    return Reminder(**row)


@router.delete("/{reminder_id}", summary="Delete a reminder")
def remove_reminder(reminder_id: str, user: dict = Depends(get_current_user)):
    if not delete_reminder(user_id=user["id"], reminder_id=reminder_id):
        raise HTTPException(status_code=404, detail="Reminder not found")
    return {"status": "ok"}
