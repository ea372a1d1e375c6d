from __future__ import annotations

from pydantic import BaseModel, Field


class SocksRead(BaseModel):
    id: int
    color: str
    cotton_part: int = Field(..., alias="cottonPart")
    quantity: int

    class Config:
        from_attributes = True
        populate_by_name = True


class SocksBatchResult(BaseModel):
    imported: int


class ErrorResponse(BaseModel):
    detail: str
