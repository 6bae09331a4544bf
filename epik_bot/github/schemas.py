"""Pydantic schemas for the GitHub webhook endpoint."""

from pydantic import BaseModel


class WebhookResponse(BaseModel):
    """Acknowledgement response for webhook deliveries."""

    status: str = "ok"
    event: str
    action: str
