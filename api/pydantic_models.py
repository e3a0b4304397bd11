from pydantic import BaseModel, Field
from typing import Optional

# --- NOTIFICATIONS ---
class StreakCheckRequest(BaseModel):
    userId: str = Field(min_length=1)

class BroadcastRequest(BaseModel):
    title: str = Field(min_length=1)
    body: str = Field(min_length=1)
    category: Optional[str] = None

class ReplayRequest(BaseModel):
    userId: str = Field(min_length=1)
    before: dict = {}
    after: dict = {}
    dryRun: bool = True

# --- DAILY CONTENT ---
class TipGenerationQuery(BaseModel):
    days: int = Field(default=1, ge=1, le=366)
    start: Optional[str] = None
