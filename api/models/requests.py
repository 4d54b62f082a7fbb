"""
Module 02 - API Request Models

Pydantic model for the inbound command form.
"""

from pydantic import BaseModel, ConfigDict, Field


# Checked in this order; the first non-empty one is the message
MESSAGE_FIELDS = ("subject", "Body", "message")


class InboundCommand(BaseModel):
    """
    URL-encoded form posted to the command endpoint.

    Different senders put the text in different fields: email-to-webhook
    bridges use `subject`, Twilio SMS uses `Body`, plain webhooks use
    `message`. Any other fields are kept but ignored.
    """

    model_config = ConfigDict(extra="allow")

    subject: str | None = Field(default=None, description="Email subject line")
    body: str | None = Field(default=None, alias="Body", description="SMS body (Twilio)")
    message: str | None = Field(default=None, description="Plain webhook message")

    @property
    def text(self) -> str:
        """The command text by field precedence, or "" when absent."""
        return self.subject or self.body or self.message or ""
