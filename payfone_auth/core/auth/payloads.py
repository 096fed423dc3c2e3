"""Pydantic models for the JSON payloads exchanged during authentication.

Field names follow each endpoint's wire format through aliases:
- start endpoint: {status, targetUrl, description}
- POST flow instruction (base64 in the auth URL): {url, data, vfp}
- GET flow auth response: {vfp}
- finish endpoint: {Status, Description, Response: {MobileNumber, ...}}
"""

from __future__ import annotations

from typing import TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..exceptions import InvalidResponseError

ModelT = TypeVar("ModelT", bound=BaseModel)


class StartResponse(BaseModel):
    """Response from the integrator's start endpoint."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    status: int
    target_url: str | None = Field(default=None, alias="targetUrl")
    description: str | None = None


class PostInstruction(BaseModel):
    """Instruction payload carried in the "data" parameter of a pfflow=2 URL."""

    model_config = ConfigDict(extra="ignore")

    url: str
    data: str
    vfp: str


class TokenBody(BaseModel):
    """GET flow auth response body."""

    model_config = ConfigDict(extra="ignore")

    vfp: str | None = None


class FinishDetails(BaseModel):
    """Device details inside a successful finish response."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    mobile_number: str = Field(alias="MobileNumber")
    mobile_operator_name: str = Field(alias="MobileOperatorName")
    payfone_alias: str = Field(alias="PayfoneAlias")


class FinishResponse(BaseModel):
    """Response from the integrator's finish endpoint."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    status: int = Field(alias="Status")
    description: str | None = Field(default=None, alias="Description")
    response: FinishDetails | None = Field(default=None, alias="Response")


def parse_payload(model: type[ModelT], raw: str | bytes, name: str) -> ModelT:
    """Validate a JSON document against a payload model.

    Args:
        model: Pydantic model class to validate against
        raw: JSON text or bytes
        name: Payload name used in the error context

    Returns:
        Validated model instance

    Raises:
        InvalidResponseError: If the document is not JSON or misses fields
    """
    try:
        return model.model_validate_json(raw)
    except ValidationError as e:
        raw_text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
        raise InvalidResponseError(
            f"Malformed {name}: {e.error_count()} validation error(s)",
            field=name,
            raw_value=raw_text,
        ) from e
