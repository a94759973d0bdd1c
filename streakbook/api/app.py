"""HTTP API for Streakbook.

JSON over HTTP. Every habit route needs an ``X-User-Id`` header naming a
registered user. Validation errors come back as 400 with a client-safe
message; storage failures come back as an opaque 500.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable

from fastapi import Depends, FastAPI, Header, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from streakbook.core import dates, errors
from streakbook.core.habit_service import HabitService
from streakbook.data.db import HabitDB, UserDB
from streakbook.ports.habit_store_port import StoreError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------


class UserIn(BaseModel):
    display_name: str


class HabitIn(BaseModel):
    title: str
    description: str = ""
    week_days: list[int] = []


class TitleIn(BaseModel):
    title: str


class DescriptionIn(BaseModel):
    description: str


class ToggleIn(BaseModel):
    date: str


class SetDayIn(BaseModel):
    date: str
    done: bool


# ---------------------------------------------------------------------------
# Error responses
# ---------------------------------------------------------------------------


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        {"status_code": status_code, "message": message},
        status_code=status_code,
    )


class UnauthorizedError(Exception):
    """Missing or unknown X-User-Id header."""


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(errors.ValidationError)
    async def _validation(request: Request, exc: errors.ValidationError):
        return _error(400, str(exc))

    @app.exception_handler(RequestValidationError)
    async def _bad_request(request: Request, exc: RequestValidationError):
        logger.debug("Malformed request to %s: %s", request.url.path, exc.errors())
        return _error(400, "bad request")

    @app.exception_handler(errors.HabitNotFoundError)
    async def _not_found(request: Request, exc: errors.HabitNotFoundError):
        return _error(404, "habit not found")

    @app.exception_handler(UnauthorizedError)
    async def _unauthorized(request: Request, exc: UnauthorizedError):
        return _error(401, "unauthorized")

    @app.exception_handler(StoreError)
    async def _store_failure(request: Request, exc: StoreError):
        logger.error("Storage failure on %s %s: %r", request.method, request.url.path, exc.__cause__)
        return _error(500, "internal server error")


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


def create_app(
    habit_db: HabitDB | None = None,
    user_db: UserDB | None = None,
    clock: Callable[[], date] = dates.today_utc,
) -> FastAPI:
    """Build the FastAPI app.

    Args:
        habit_db: Habit store; defaults to one at settings.DATABASE_PATH.
        user_db: User store; defaults to one at settings.DATABASE_PATH.
        clock: Supplies today's UTC date to the service.
    """
    from streakbook.config import settings

    habit_db = habit_db or HabitDB()
    user_db = user_db or UserDB()
    service = HabitService(
        habit_db,
        clock=clock,
        patch_window_days=settings.HISTORY_PATCH_WINDOW_DAYS,
        min_history_year=settings.MIN_HISTORY_YEAR,
    )

    app = FastAPI(title="Streakbook", docs_url=None, redoc_url=None)
    _install_error_handlers(app)

    def current_user(x_user_id: str = Header(default="")) -> str:
        if not x_user_id or not user_db.is_registered(x_user_id):
            raise UnauthorizedError()
        return x_user_id

    # --- Users -------------------------------------------------------------

    @app.post("/users", status_code=201)
    def register(body: UserIn):
        name = body.display_name.strip()
        if not name:
            raise errors.ValidationError("display name is required")
        return user_db.add_user(name).to_dict()

    @app.get("/me")
    def me(user_id: str = Depends(current_user)):
        return user_db.get_user(user_id).to_dict()

    # --- Habits ------------------------------------------------------------

    @app.post("/habits", status_code=201)
    def create_habit(body: HabitIn, user_id: str = Depends(current_user)):
        habit = service.create_habit(user_id, body.title, body.description, body.week_days)
        return habit.to_dict()

    @app.get("/habits")
    def list_habits(user_id: str = Depends(current_user)):
        return [h.to_dict() for h in service.list_habits(user_id)]

    @app.delete("/habits/{habit_id}", status_code=204)
    def delete_habit(habit_id: str, user_id: str = Depends(current_user)):
        service.delete_habit(habit_id, user_id)
        return Response(status_code=204)

    @app.patch("/habits/{habit_id}/title", status_code=204)
    def patch_title(habit_id: str, body: TitleIn, user_id: str = Depends(current_user)):
        service.rename_habit(habit_id, body.title, user_id)
        return Response(status_code=204)

    @app.patch("/habits/{habit_id}/description", status_code=204)
    def patch_description(
        habit_id: str, body: DescriptionIn, user_id: str = Depends(current_user),
    ):
        service.describe_habit(habit_id, body.description, user_id)
        return Response(status_code=204)

    @app.patch("/habits/{habit_id}/end", status_code=204)
    def end_habit(habit_id: str, user_id: str = Depends(current_user)):
        service.end_habit(habit_id, user_id)
        return Response(status_code=204)

    # --- History -----------------------------------------------------------

    @app.patch("/habits/{habit_id}/history", status_code=204)
    def toggle_history(habit_id: str, body: ToggleIn, user_id: str = Depends(current_user)):
        service.toggle_day(habit_id, body.date, user_id)
        return Response(status_code=204)

    @app.put("/habits/{habit_id}/history", status_code=204)
    def set_history(habit_id: str, body: SetDayIn, user_id: str = Depends(current_user)):
        service.set_day(habit_id, body.date, body.done, user_id)
        return Response(status_code=204)

    @app.get("/habits/{habit_id}/history")
    def get_history(
        habit_id: str,
        year: int = Query(...),
        month: int = Query(...),
        user_id: str = Depends(current_user),
    ):
        history = service.get_month_history(habit_id, year, month, user_id)
        return [day.to_dict() for day in history]

    return app
