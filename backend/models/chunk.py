from typing import Optional

from pydantic import BaseModel, Field


class TerminalMarker(BaseModel):
    """
    The part of a submission read first: is this the last one?

    The shipper sends `lines` alongside done=True as well; they are never
    looked at, so they are not validated here.
    """

    done: bool = False
    error: Optional[str] = None


class ChunkPayload(BaseModel):
    """A batch of log lines. Null or missing `lines` is an empty batch."""

    lines: Optional[list[str]] = None


class ContinueResponse(BaseModel):
    # "continue" is a Python keyword, so the wire name is an alias
    continue_url: str = Field(serialization_alias="continue")
