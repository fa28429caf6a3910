"""Schemas for governance rule endpoints."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from govconsole.domain.entities import (
    PLATFORMS,
    RULE_TYPE_NAMING_CONVENTION,
    RULE_TYPES,
    RuleDraft,
)


class RuleWrite(BaseModel):
    """Payload required to create or replace a rule."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    name: str = Field(..., min_length=1)
    type: str = RULE_TYPE_NAMING_CONVENTION
    platform: str = PLATFORMS[0]
    condition: str = Field(..., min_length=1)
    message: str = ""
    is_active: bool = Field(default=True, alias="isActive")

    @field_validator("type")
    @classmethod
    def _validate_type(cls, value: str) -> str:
        if value not in RULE_TYPES:
            raise ValueError(f"type must be one of: {', '.join(RULE_TYPES)}")
        return value

    @field_validator("platform")
    @classmethod
    def _validate_platform(cls, value: str) -> str:
        if value not in PLATFORMS:
            raise ValueError(f"platform must be one of: {', '.join(PLATFORMS)}")
        return value

    def to_draft(self) -> RuleDraft:
        return RuleDraft(
            name=self.name,
            type=self.type,
            platform=self.platform,
            condition=self.condition,
            message=self.message,
            is_active=self.is_active,
        )


class RuleRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: str
    name: str
    type: str
    platform: str
    condition: str
    message: str
    is_active: bool = Field(..., alias="isActive")
    created_at: str | None = Field(default=None, alias="createdAt")
    created_by: str | None = Field(default=None, alias="createdBy")
    last_modified_at: str | None = Field(default=None, alias="lastModifiedAt")


class RuleSuggestionRequest(BaseModel):
    name: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)


class RuleSuggestionResponse(BaseModel):
    condition: str | None = None
    message: str | None = None
