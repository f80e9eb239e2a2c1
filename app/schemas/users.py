from __future__ import annotations
from pydantic import BaseModel, ConfigDict
from datetime import datetime

class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    name: str
    email: str
    status: str
    created_at: datetime
