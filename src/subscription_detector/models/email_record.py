"""Email input model.

Only the handful of fields the extractors read are kept. The raw `date` string
is preserved as received; it is parsed when a subscription is built so that a
malformed date only affects the email it belongs to.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class EmailRecord(BaseModel):
    """A single email as supplied to the detector."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    body: str = Field(default="", description="Email body, possibly HTML")
    snippet: str = Field(default="", description="Short plain-text preview")
    # "from" is a keyword, so the JSON key is mapped through an alias.
    sender: str = Field(default="", alias="from", description="From header")
    subject: str = Field(default="", description="Subject header")
    date: str = Field(description="Date header or any parseable date/time string")
