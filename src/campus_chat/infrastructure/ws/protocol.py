"""Frames exchanged over ``/ws/chat``.

Every frame is ``{"type": ..., "data": {...}}``. Inbound types stay free-form
so the read loop can answer an unknown one with an ``unknown_type`` error.
"""
from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

OutboundType = Literal["pong", "conversations", "thread", "interaction", "error"]


class WsInbound(BaseModel):
    """Client → Server: ping, conversations, open, leave, send, delete or toggle."""

    type: str = Field(min_length=1, max_length=32)
    data: dict[str, Any] = Field(default_factory=dict)


class WsOutbound(BaseModel):
    """Server → Client."""

    type: OutboundType
    data: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def error(cls, code: str, **detail: Any) -> WsOutbound:
        return cls(type="error", data={"code": code, **detail})
