"""Schema for the public client configuration of a deployment."""

from pydantic import BaseModel, ConfigDict, Field


class ClientConfigRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    api_key: str | None = Field(default=None, alias="apiKey")
    auth_domain: str | None = Field(default=None, alias="authDomain")
    project_id: str | None = Field(default=None, alias="projectId")
    storage_bucket: str | None = Field(default=None, alias="storageBucket")
    messaging_sender_id: str | None = Field(default=None, alias="messagingSenderId")
    app_id: str | None = Field(default=None, alias="appId")
    measurement_id: str | None = Field(default=None, alias="measurementId")
    deployment_id: str = Field(..., alias="deploymentId")
