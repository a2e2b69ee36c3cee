from pydantic import BaseModel
from typing import List, Optional


class RelatedMemory(BaseModel):
    id: str
    excerpt: str
    date: Optional[str] = None
    type: Optional[str] = None


class AskResponse(BaseModel):
    user_response: str
    related_memories: List[RelatedMemory] = []


class SimilarEventResponse(BaseModel):
    id: str
    timestamp: Optional[str] = None
    type: Optional[str] = None
    text: Optional[str] = None
    project: Optional[str] = None
    source: Optional[str] = None
    similarity: float
