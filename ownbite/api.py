# -*- coding: utf-8 -*-
"""
OwnBite API

Food diary, photo scanning, nutrition goals, bloodwork insights, meal plans,
community recipes, grocery lists, affiliates, reminders, social sharing and rewards.
"""

from __future__ import annotations

import logging
import os

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .app_db import init_app_db
from .activity.api import router as activity_router
from .affiliates.api import router as affiliates_router
from .auth.api import profile_router
from .auth.api import router as auth_router
from .auth.security import get_current_user_from_request
from .bloodwork.api import router as bloodwork_router
from .coach.api import router as coach_router
from .community.api import router as community_router
from .diary.api import router as diary_router
from .goals.api import router as goals_router
from .grocery.api import router as grocery_router
from .meal_plans.api import router as meal_plans_router
from .recipes.api import router as recipes_router
from .reminders.api import router as reminders_router
from .rewards.api import router as rewards_router
from .scan.api import router as scan_router
from .social.api import router as social_router

log = logging.getLogger(__name__)

app = FastAPI(
    title="OwnBite",
    description="Nutrition tracking, AI food scanning and bloodwork-driven meal planning",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_origins != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def _startup_init_db() -> None:
    init_app_db(settings.app_db_path)


# Ensure the app DB exists even when lifespan events are not triggered (e.g. some test clients).
init_app_db(settings.app_db_path)


_AUTH_EXEMPT_PREFIXES = (
    "/api/auth/login",
    "/api/auth/register",
    "/api/docs",
    "/api/redoc",
    "/api/openapi.json",
)


@app.middleware("http")
async def _auth_gate(request: Request, call_next):
    path = request.url.path
    if request.method == "OPTIONS":
        return await call_next(request)
    if path.startswith("/api") and path != "/api/health" and not any(path.startswith(p) for p in _AUTH_EXEMPT_PREFIXES):
        try:
            user = get_current_user_from_request(request)
            request.state.user = user
        except HTTPException as exc:
            return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})
    return await call_next(request)


app.include_router(auth_router)
app.include_router(profile_router)
app.include_router(diary_router)
app.include_router(scan_router)
app.include_router(goals_router)
app.include_router(bloodwork_router)
app.include_router(meal_plans_router)
app.include_router(coach_router)
app.include_router(recipes_router)
app.include_router(community_router)
app.include_router(grocery_router)
app.include_router(affiliates_router)
app.include_router(reminders_router)
app.include_router(social_router)
app.include_router(rewards_router)
app.include_router(activity_router)


@app.get("/api/health", summary="Liveness check")
def health():
    return {"ok": True}


def run() -> None:
    """Console entry point (used by pyproject [project.scripts])."""
    import uvicorn

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    host = os.environ.get("OWNBITE_HOST") or os.environ.get("HOST") or "127.0.0.1"
    port_raw = os.environ.get("OWNBITE_PORT") or os.environ.get("PORT") or "8000"
    try:
        port = int(port_raw)
    except ValueError:
        port = 8000

    log.info("Starting OwnBite API on %s:%s", host, port)
    uvicorn.run("ownbite.api:app", host=host, port=port, reload=False)
