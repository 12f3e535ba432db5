# imageproxy/validator.py
import json
from typing import Any, Union

from .model import MALFORMED_REQUEST, PROMPT_REQUIRED, ClientError, GenerationRequest


def _lookup_ci(data: dict, field: str) -> Any:
    """Case-insensitive key lookup; the last matching key wins."""
    value = None
    for key, v in data.items():
        if isinstance(key, str) and key.lower() == field:
            value = v
    return value


def validate(raw_body: bytes) -> Union[GenerationRequest, ClientError]:
    """
    Parse the inbound body into a GenerationRequest.

    Pure function: no I/O. Returns a ClientError instead of raising so the
    caller can render it directly.
    """
    if not raw_body or not raw_body.strip():
        return ClientError(message=PROMPT_REQUIRED)

    try:
        data = json.loads(raw_body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError, RecursionError):
        return ClientError(message=MALFORMED_REQUEST)

    if data is None:
        return ClientError(message=PROMPT_REQUIRED)
    if not isinstance(data, dict):
        return ClientError(message=MALFORMED_REQUEST)

    prompt = _lookup_ci(data, "prompt")
    if prompt is None:
        return ClientError(message=PROMPT_REQUIRED)
    if not isinstance(prompt, str):
        return ClientError(message=MALFORMED_REQUEST)
    if not prompt.strip():
        return ClientError(message=PROMPT_REQUIRED)

    return GenerationRequest(prompt=prompt)
