import os
from io import BytesIO
from typing import Optional, Tuple

import requests
from PIL import Image

BACKEND_URL = os.getenv("BACKEND_URL", "http://127.0.0.1:8000")

# The proxy holds the request open while it polls EverArt (up to ~60s by default).
GENERATE_TIMEOUT = float(os.getenv("GENERATE_TIMEOUT", "90"))


class GenerationFailed(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def _error_message(resp: requests.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.text or f"HTTP {resp.status_code}"
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return resp.text


def generate_image(prompt: str, backend_url: str = BACKEND_URL, timeout: float = GENERATE_TIMEOUT) -> str:
    """POST /api/generate-image -> image URL"""
    resp = requests.post(
        f"{backend_url.rstrip('/')}/api/generate-image",
        json={"prompt": prompt},
        timeout=timeout,
    )
    if resp.status_code != 200:
        raise GenerationFailed(_error_message(resp), status_code=resp.status_code)

    data = resp.json()
    items = data.get("data") or []
    url = items[0].get("url") if items else None
    if not url:
        raise GenerationFailed("Invalid response from proxy", status_code=resp.status_code)
    return url


def download_image(image_url: str) -> Tuple[Optional[Image.Image], Optional[bytes]]:
    """Download an image and decode it with Pillow. Returns (None, None) on failure."""
    try:
        resp = requests.get(image_url, timeout=30)
        resp.raise_for_status()
        img = Image.open(BytesIO(resp.content)).convert("RGB")
        return img, resp.content
    except (requests.RequestException, OSError):
        return None, None
