"""Contact directory records."""

from typing import Optional

from pydantic import BaseModel, Field


class ContactRecord(BaseModel):
    """A contact from the address book integration."""

    name: str = Field(default="", description="Display name")
    given_name: str = Field(default="", description="Given (first) name")
    family_name: str = Field(default="", description="Family (last) name")
    organization: Optional[str] = Field(None, description="Organization name")
    emails: list[str] = Field(default_factory=list, description="Email addresses")
