# imageproxy/model.py
import json
from enum import Enum
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

PROMPT_REQUIRED = "Prompt is required"
MALFORMED_REQUEST = "Malformed request body"
INVALID_UPSTREAM_RESPONSE = "Invalid response from EverArt API"
GENERATION_TIMED_OUT = "Image generation timed out or failed"


class ProxyError(Exception):
    """Base class for errors raised inside the proxy."""


class ConfigurationError(ProxyError):
    """Operator-side misconfiguration, e.g. a missing API key."""


# ==========================
# Inbound
# ==========================

class GenerationRequest(BaseModel):
    prompt: str


class RemoteJobHandle(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str


# ==========================
# EverArt payloads
# ==========================

class JobState(str, Enum):
    PENDING = "PENDING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


# EverArt status vocabulary -> JobState, matched exactly. Anything unlisted is still running.
_REMOTE_STATES = {
    "SUCCEEDED": JobState.SUCCEEDED,
    "FAILED": JobState.FAILED,
    "CANCELED": JobState.FAILED,
}


class EverArtGeneration(BaseModel):
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    id: str
    model_id: Optional[str] = None
    status: Optional[str] = None
    image_url: Optional[str] = None
    type: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class EverArtInitialResponse(BaseModel):
    success: bool = False
    generations: List[EverArtGeneration] = Field(default_factory=list)
    request_id: Optional[str] = None


class EverArtStatusResponse(BaseModel):
    """One poll result. Never updated in place; every poll decodes a new one."""

    model_config = ConfigDict(frozen=True)

    success: bool = False
    generation: Optional[EverArtGeneration] = None

    @property
    def state(self) -> JobState:
        if self.generation is None or not self.generation.status:
            return JobState.PENDING
        return _REMOTE_STATES.get(self.generation.status, JobState.PENDING)

    @property
    def is_succeeded(self) -> bool:
        # All three must hold; success=true alone is not enough.
        return (
            self.success
            and self.state is JobState.SUCCEEDED
            and bool(self.generation.image_url)
        )


# ==========================
# Outcome
# ==========================

class Success(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["success"] = "success"
    url: str

    def to_body(self) -> dict:
        return {"data": [{"url": self.url}]}


class ClientError(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["client_error"] = "client_error"
    message: str
    status_code: int = 400


class UpstreamError(BaseModel):
    """
    Failure attributed to the remote side, or an unexpected fault.

    `body` is sent as-is so a rejected submission reaches the caller verbatim.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["upstream_error"] = "upstream_error"
    status_code: int
    body: bytes
    media_type: Optional[str] = None

    @classmethod
    def from_message(cls, message: str, status_code: int = 500) -> "UpstreamError":
        return cls(
            status_code=status_code,
            body=json.dumps({"error": message}).encode("utf-8"),
            media_type="application/json",
        )


class Timeout(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["timeout"] = "timeout"
    message: str = GENERATION_TIMED_OUT
    status_code: int = 500


ProxyResult = Union[Success, ClientError, UpstreamError, Timeout]
