from __future__ import annotations

from pydantic import BaseModel


class InteractionStateResponse(BaseModel):
    count: int
    viewer_has_acted: bool

    model_config = {"from_attributes": True}


class SetInteractionRequest(BaseModel):
    acted: bool


class CountResponse(BaseModel):
    count: int
