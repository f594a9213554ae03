import time

from pydantic import BaseModel, Field


class Session(BaseModel):
    session_id: str
    next_sequence: int = 0
    last_active: float = Field(default_factory=time.monotonic)   # monotonic seconds
