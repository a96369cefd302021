from pydantic import BaseModel


class MessageResponse(BaseModel):
    """Acknowledgement body for deletions."""

    msg: str
