"""Recipient Domain Models

ContactRecord is the raw row handed back by a ContactDirectory;
Recipient is the trimmed, deliverable form used by the dispatch path.
"""

from pydantic import BaseModel, ConfigDict, Field

from .enums import Channel


class ContactRecord(BaseModel):
    """Directory record for one person"""

    id: str = Field(description="Directory identifier")
    first_name: str = Field(default="", description="First name")
    last_name: str = Field(default="", description="Last name")
    email: str | None = Field(default=None, description="Email address")
    phone: str | None = Field(default=None, description="Phone number, any format")

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Recipient(BaseModel):
    """Resolved contact target"""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Directory identifier")
    email: str | None = Field(default=None, description="Trimmed email, None when absent")
    phone: str | None = Field(default=None, description="Trimmed phone, None when absent")
    name: str = Field(default="", description="Display name, not unique")

    def address_for(self, channel: Channel) -> str | None:
        """Address usable on the given channel, or None"""
        if channel == Channel.EMAIL:
            return self.email
        return self.phone

    def has_address_for(self, channel: Channel) -> bool:
        return bool(self.address_for(channel))


class SkippedRecipient(BaseModel):
    """A requested id that did not make it into the dispatch"""

    id: str
    reason: str
