from models.chunk import ChunkPayload, ContinueResponse, TerminalMarker
from models.session import Session

__all__ = ["ChunkPayload", "ContinueResponse", "Session", "TerminalMarker"]
