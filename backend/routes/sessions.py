import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError

from config import Settings
from models.chunk import ChunkPayload, ContinueResponse, TerminalMarker
from models.session import Session
from store import SessionStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["sessions"])


# ---------- Dependencies ----------

def get_store(request: Request) -> SessionStore:
    return request.app.state.store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def session_url(request: Request, session: Session) -> str:
    return f"{request.app.state.base_url}/sessions/{session.session_id}/{session.next_sequence}"


# ---------- Helpers ----------

def _parse_sequence(raw: Optional[str]) -> Optional[int]:
    if raw is None or not (raw.isascii() and raw.isdigit()):
        return None
    return int(raw)


def _expect_session(store: SessionStore, session_id: str, sequence: Optional[int]) -> Session:
    session = store.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Not found")
    if sequence is None or sequence != session.next_sequence:
        raise HTTPException(status_code=400, detail="Bad sequence")
    return session


async def _read_body(request: Request, limit: int) -> bytes:
    """Collect the whole request body, refusing anything over `limit` bytes."""
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > limit:
        logger.warning("Body of %s bytes exceeds %d, sending 413", declared, limit)
        raise HTTPException(status_code=413, detail="Body too large")

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            logger.warning("Body exceeds %d bytes, sending 413", limit)
            raise HTTPException(status_code=413, detail="Body too large")
    return bytes(body)


# ---------- Endpoints ----------

@router.post("/sessions")
async def create_session(request: Request, store: SessionStore = Depends(get_store)):
    """
    Opens a new ingestion session at sequence 0.
    The Location header (and the body) is the URL for the first chunk.
    """
    session = store.create()
    location = session_url(request, session)
    logger.info("created session %s", session.session_id)
    return PlainTextResponse(location, status_code=201, headers={"Location": location})


@router.post("/sessions/{rest:path}")
async def submit_chunk(
    rest: str,
    request: Request,
    store: SessionStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    """
    Accepts a chunk posted to /sessions/{id}/{sequence}.

    Only the first two segments after /sessions/ count; anything past the
    sequence is ignored, and a missing sequence never matches.

    Unknown id and wrong sequence are rejected before the body is read.
    Both are checked again once the body is in, since another request for
    the same session may have been handled while this one was waiting.
    Nothing below the second check awaits, so it runs as one step.
    """
    parts = rest.split("/")
    session_id = parts[0]
    expected = _parse_sequence(parts[1] if len(parts) > 1 else None)
    _expect_session(store, session_id, expected)

    body = await _read_body(request, settings.max_body_bytes)
    session = _expect_session(store, session_id, expected)

    try:
        marker = TerminalMarker.model_validate_json(body)
        if not marker.done:
            payload = ChunkPayload.model_validate_json(body)
    except ValidationError:
        logger.warning("Bad JSON, sending 400")
        raise HTTPException(status_code=400, detail="Bad JSON")

    if marker.done:
        if marker.error:
            logger.info("error: %s", marker.error)
        else:
            logger.info("done.")
        store.remove(session_id)
        return PlainTextResponse("Done.\n")

    store.advance(session)
    for line in payload.lines or []:
        logger.info("line: %s", line)

    response = ContinueResponse(continue_url=session_url(request, session))
    return JSONResponse(response.model_dump(by_alias=True))
