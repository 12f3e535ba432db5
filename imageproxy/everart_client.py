from typing import Any, Dict

import httpx

DEFAULT_API_URL = "https://api.everart.ai"
DEFAULT_MODEL_ID = "266497667515949056"


def build_generation_payload(prompt: str) -> Dict[str, Any]:
    """
    Body for EverArt's txt2img endpoint: one square image, returned as a URL.
    """
    return {
        "prompt": prompt,
        "image_count": 1,
        "type": "txt2img",
        "height": 1024,
        "width": 1024,
        "response_format": "url",
    }


class EverArtClient:
    """
    Thin wrapper over the two EverArt endpoints the proxy needs.

    The wrapped httpx.AsyncClient is shared by every in-flight request, so
    nothing request-specific is stored on it: the bearer header is built per
    call. Responses are returned unparsed; status handling belongs to the
    orchestrator.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        base_url: str = DEFAULT_API_URL,
        model_id: str = DEFAULT_MODEL_ID,
    ):
        self.http = http
        self.base_url = base_url.rstrip("/")
        self.model_id = model_id

    @staticmethod
    def _auth_headers(api_key: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {api_key}"}

    def generations_url(self) -> str:
        return f"{self.base_url}/v1/models/{self.model_id}/generations"

    def generation_url(self, generation_id: str) -> str:
        return f"{self.base_url}/v1/generations/{generation_id}"

    async def submit_generation(self, prompt: str, api_key: str) -> httpx.Response:
        """POST a new generation job. Returns the raw response."""
        return await self.http.post(
            self.generations_url(),
            json=build_generation_payload(prompt),
            headers=self._auth_headers(api_key),
        )

    async def get_generation(self, generation_id: str, api_key: str) -> httpx.Response:
        """GET the current state of a generation job."""
        return await self.http.get(
            self.generation_url(generation_id),
            headers=self._auth_headers(api_key),
        )


def create_http_client(timeout: float = 30.0) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=timeout)
