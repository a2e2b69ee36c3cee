from pydantic import BaseModel, Field
from typing import Optional


class AskRequest(BaseModel):
    query: str = Field(min_length=1)
    project: Optional[str] = None


class ConnectionsRequest(BaseModel):
    project: Optional[str] = None


class SummaryRequest(BaseModel):
    project: str = Field(min_length=1)
