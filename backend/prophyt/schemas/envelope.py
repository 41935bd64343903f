"""Shared response envelope: every endpoint answers with Success or Failure."""

from typing import Any, Literal

from pydantic import BaseModel


class PageMeta(BaseModel):
    total: int
    limit: int
    offset: int


class Success(BaseModel):
    success: Literal[True] = True
    data: Any
    meta: PageMeta | None = None

    def body(self) -> dict:
        body: dict[str, Any] = {"success": True, "data": self.data}
        if self.meta is not None:
            body["meta"] = self.meta.model_dump()
        return body


class Failure(BaseModel):
    success: Literal[False] = False
    error: str
    details: Any = None

    def body(self) -> dict:
        body: dict[str, Any] = {"success": False, "error": self.error}
        if self.details is not None:
            body["details"] = self.details
        return body


def ok(data: Any, meta: PageMeta | None = None) -> dict:
    return Success(data=data, meta=meta).body()


def fail(error: str, details: Any = None) -> dict:
    return Failure(error=error, details=details).body()
