from pydantic import BaseModel


class MessageResponse(BaseModel):
    message: str


class SweepResponse(BaseModel):
    removed: list[str]
