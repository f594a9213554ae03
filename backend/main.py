from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Settings
from routes import sessions
from store import SessionStore


async def plain_text_error(request: Request, exc: StarletteHTTPException):
    # Unmatched routes and wrong methods are both plain "Not found"
    if exc.status_code in (404, 405):
        return PlainTextResponse("Not found\n", status_code=404)
    return PlainTextResponse(f"{exc.detail}\n", status_code=exc.status_code)


def create_app(
    base_url: str,
    settings: Optional[Settings] = None,
    store: Optional[SessionStore] = None,
) -> FastAPI:
    """
    Builds the receiver app.

    base_url is the externally visible http://host:port prefix used in
    every Location / continue URL handed back to the shipper.
    """
    settings = settings or Settings()

    app = FastAPI(
        title="Log Receiver",
        version="0.1.0",
        redirect_slashes=False,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.base_url = base_url.rstrip("/")
    app.state.settings = settings
    app.state.store = store if store is not None else SessionStore(ttl=settings.session_ttl)

    app.add_exception_handler(StarletteHTTPException, plain_text_error)
    app.include_router(sessions.router)
    return app
