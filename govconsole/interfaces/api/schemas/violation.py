"""Schemas for violation endpoints."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ViolationCreate(BaseModel):
    """Violation reported by an external detector."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    timestamp: str | None = None
    rule_name: str = Field(..., alias="ruleName", min_length=1)
    user_id: str | None = Field(default=None, alias="userId")
    campaign_id: str | None = Field(default=None, alias="campaignId")
    platform: str | None = None
    field_name: str | None = Field(default=None, alias="fieldName")
    original_value: Any = Field(default=None, alias="originalValue")
    suggested_correction: Any = Field(default=None, alias="suggestedCorrection")
    status: str | None = None

    def to_document(self) -> dict[str, Any]:
        document = self.model_dump(by_alias=True, exclude_none=True)
        document.pop("id", None)
        return document


class ViolationRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    timestamp: str | None = None
    rule_name: str | None = Field(default=None, alias="ruleName")
    user_id: str | None = Field(default=None, alias="userId")
    campaign_id: str | None = Field(default=None, alias="campaignId")
    platform: str | None = None
    field_name: str | None = Field(default=None, alias="fieldName")
    original_value: Any = Field(default=None, alias="originalValue")
    suggested_correction: Any = Field(default=None, alias="suggestedCorrection")
    status: str | None = None
