"""Pydantic schemas for pages.

Learn: Separate "Write" schemas (input) from "Read" schemas (output).
Note there is no owner field on the input side. The owner always comes
from the bearer token.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from pagevault.schemas.auth import CamelModel


class PageWrite(BaseModel):
    title: str = Field(..., min_length=1)
    content: Optional[str] = None


class PageRead(BaseModel):
    id: int
    title: str
    content: str

    model_config = ConfigDict(from_attributes=True)


class PageCreated(CamelModel):
    id: int
    title: str
    content: str
    owner_id: int


class MessageResponse(BaseModel):
    message: str
