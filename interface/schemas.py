"""Message shapes crossing the search worker boundary and the REST API."""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class MovePayload(BaseModel):
    row: int = Field(ge=0, le=7)
    col: int = Field(ge=0, le=7)


class SearchRequest(BaseModel):
    """One compute request: board, side to move, personality, and caller tag."""

    model_config = ConfigDict(populate_by_name=True)

    board: List[List[int]]
    side: int
    config: Dict[str, Any]
    request_id: Any = Field(default=None, alias="requestId")


class ReadyMessage(BaseModel):
    type: Literal["READY"] = "READY"


class ResultMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["RESULT"] = "RESULT"
    move: Optional[MovePayload]
    request_id: Any = Field(default=None, alias="requestId")


class ErrorMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["ERROR"] = "ERROR"
    error: str
    request_id: Any = Field(default=None, alias="requestId")
