"""Wire models of the analysis endpoints.

Request envelopes mirror the chat-style payload the endpoints expect:
the actual request is JSON-encoded inside `messages[0].content`.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant", "system"] = "user"
    content: str
    id: Optional[str] = None


class ChatRequest(BaseModel):
    """
    Envelope shared by the calculator and meal-stitch item endpoints.

    Example:
        >>> request = ChatRequest.for_payload({"type": "analysis_request", "image": "..."})
        >>> request.to_wire()["messages"][0]["role"]
        'user'
    """

    model_config = ConfigDict(frozen=True)

    messages: List[ChatMessage] = Field(..., min_length=1)

    @classmethod
    def for_payload(cls, payload: Dict[str, Any], message_id: Optional[str] = None) -> ChatRequest:
        return cls(messages=[ChatMessage(content=json.dumps(payload), id=message_id)])

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class ItemAnalysisResponse(BaseModel):
    """Answer of `/llm-{n}`."""

    model_config = ConfigDict(extra="ignore")

    status: Optional[str] = None
    analysis: str
    timestamp: Optional[str] = None


class SummaryResponse(BaseModel):
    """Answer of `/summarize`."""

    model_config = ConfigDict(extra="ignore")

    status: Optional[str] = None
    synthesis: str
    timestamp: Optional[str] = None


class FoodComparisonRequest(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    before_image: str = Field(..., alias="beforeImage", min_length=1)
    after_image: str = Field(..., alias="afterImage", min_length=1)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class FoodComparisonResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    success: Optional[bool] = None
    analysis: Optional[str] = None
    error: Optional[str] = None

    @field_validator("analysis", "error")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat empty strings as missing."""
        if v is not None and not v.strip():
            return None
        return v
