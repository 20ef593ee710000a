"""
Sweepstakes, winners, form entries and coupons.

Route map::

    POST /api/sweepstakes/add-entry   name + email entry
    POST /api/sweepstakes/entry       entry earned by watching a video
    GET  /api/winners                 announced winners, newest first
    POST /api/winners                 announce a winner
    GET  /api/entries                 stored form submissions
    POST /api/entries                 store a form submission
    *    /api/coupons                 active coupons (GET only)
"""

from __future__ import annotations

import json
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from src.sweepstakes import SheetsAppendError, SheetsNotConfiguredError, SweepstakesValidationError
from src.utils.logger import get_logger

from .dependencies import SweepstakesDep

router = APIRouter(prefix="/api")
logger = get_logger().create_module_logger("serving.promotions")


async def _json_object(request: Request) -> Any:
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


def _field(body: Any, key: str) -> Any:
    return body.get(key) if isinstance(body, dict) else None


@router.post("/sweepstakes/add-entry")
async def add_sweepstakes_entry(request: Request, sweepstakes: SweepstakesDep):
    body = await _json_object(request)
    try:
        return sweepstakes.add_entry(_field(body, "name"), _field(body, "email"))
    except SweepstakesValidationError as exc:
        return JSONResponse({"error": str(exc)}, status_code=400)
    except (SheetsAppendError, SheetsNotConfiguredError) as exc:
        logger.error({"event": "sweepstakes.entry.failed", "error": str(exc)})
        return JSONResponse({"error": "Failed to add entry"}, status_code=500)


@router.post("/sweepstakes/entry")
async def record_video_entry(request: Request, sweepstakes: SweepstakesDep):
    body = await _json_object(request)
    try:
        return sweepstakes.record_video_entry(
            _field(body, "email"),
            _field(body, "phone"),
            _field(body, "videoId"),
            _field(body, "advertiserId"),
            _field(body, "packageType"),
        )
    except SweepstakesValidationError as exc:
        return JSONResponse({"error": str(exc)}, status_code=400)


@router.get("/winners")
def list_winners(sweepstakes: SweepstakesDep):
    return sweepstakes.list_winners()


@router.post("/winners")
async def record_winner(request: Request, sweepstakes: SweepstakesDep):
    body = await _json_object(request)
    try:
        return sweepstakes.record_winner(
            _field(body, "name"), _field(body, "prize"), _field(body, "date")
        )
    except SweepstakesValidationError as exc:
        return JSONResponse({"error": str(exc)}, status_code=400)
    except (SheetsAppendError, SheetsNotConfiguredError) as exc:
        logger.error({"event": "sweepstakes.winner.failed", "error": str(exc)})
        return JSONResponse({"error": "Internal Server Error"}, status_code=500)


@router.get("/entries")
def list_form_entries(sweepstakes: SweepstakesDep):
    return sweepstakes.list_form_entries()


@router.post("/entries")
async def add_form_entry(request: Request, sweepstakes: SweepstakesDep):
    body = await _json_object(request)
    try:
        return sweepstakes.add_form_entry(body)
    except SweepstakesValidationError:
        return JSONResponse({"success": False, "error": "Invalid submission"}, status_code=400)


@router.api_route("/coupons", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
def coupons(request: Request, sweepstakes: SweepstakesDep):
    if request.method != "GET":
        return JSONResponse({"ok": False, "error": "Method not allowed"}, status_code=405)
    return {"ok": True, "coupons": sweepstakes.active_coupons()}
