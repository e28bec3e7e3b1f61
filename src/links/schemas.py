from pydantic import BaseModel


class Link(BaseModel):
    id: str
    url: str


class LinkId(BaseModel):
    id: str


class DeleteResponse(BaseModel):
    status: str = "success"
    message: str = "Link deleted"


class ErrorResponse(BaseModel):
    error: str
