from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Model serialized with the camelCase keys the analysis prompts ask for."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorResponse(BaseModel):
    error_code: str
    message: str


class ServiceStatus(BaseModel):
    configured: bool
    message: str


class StatusResponse(BaseModel):
    model: str
    services: dict[str, ServiceStatus]
