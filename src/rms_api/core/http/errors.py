"""Exception handlers that translate authorization errors to HTTP responses."""

from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ..auth.errors import AuthorizationError


def _handle_authorization_error(_request: Request, exc: AuthorizationError) -> JSONResponse:
    """Translate permission denials into HTTP 403 responses."""

    team_id = exc.scope.team_id
    tournament_id = exc.scope.tournament_id
    detail = {
        "error": "forbidden",
        "message": str(exc),
        "permission": exc.permission_key,
        "team_id": str(team_id) if team_id is not None else None,
        "tournament_id": str(tournament_id) if tournament_id is not None else None,
    }
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content={"detail": detail},
    )


def register_auth_exception_handlers(app: FastAPI) -> None:
    """Attach authorization handlers to the FastAPI app."""

    app.add_exception_handler(AuthorizationError, _handle_authorization_error)


__all__ = ["register_auth_exception_handlers"]
