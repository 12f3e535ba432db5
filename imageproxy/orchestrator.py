# imageproxy/orchestrator.py

import asyncio
from typing import Awaitable, Callable, Optional

import httpx
from pydantic import ValidationError

from .everart_client import EverArtClient
from .model import (
    INVALID_UPSTREAM_RESPONSE,
    ConfigurationError,
    EverArtInitialResponse,
    EverArtStatusResponse,
    GenerationRequest,
    JobState,
    ProxyResult,
    RemoteJobHandle,
    Success,
    Timeout,
    UpstreamError,
)
from .observer import GenerationObserver

DEFAULT_POLL_INTERVAL = 2.0  # seconds
DEFAULT_MAX_ATTEMPTS = 30

Sleep = Callable[[float], Awaitable[None]]


class GenerationOrchestrator:
    """
    Submit a job to EverArt, then poll it until it finishes or the budget runs out.

    Retry policy: submission is tried once. A status check that answers non-2xx
    or with an unreadable body is reported and skipped; a network fault is not
    retried and fails the request. Otherwise the job is only given up on when
    `max_attempts` polls have been made. With
    `stop_on_remote_failure` set, a FAILED/CANCELED status ends polling early.

    The instance holds no per-request state and is shared across requests.
    """

    def __init__(
        self,
        client: EverArtClient,
        observer: Optional[GenerationObserver] = None,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        stop_on_remote_failure: bool = False,
        sleep: Sleep = asyncio.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.client = client
        self.observer = observer or GenerationObserver()
        self.poll_interval = max(0.0, poll_interval)
        self.max_attempts = max_attempts
        self.stop_on_remote_failure = stop_on_remote_failure
        self._sleep = sleep

    async def generate(
        self,
        req: GenerationRequest,
        api_key: Optional[str],
        observer: Optional[GenerationObserver] = None,
    ) -> ProxyResult:
        """Run one orchestration. Never raises: every failure becomes a ProxyResult."""
        obs = observer or self.observer
        try:
            return await self._run(req, api_key, obs)
        except Exception as e:
            obs.fault(e)
            return UpstreamError.from_message(str(e) or type(e).__name__)

    async def _run(
        self, req: GenerationRequest, api_key: Optional[str], obs: GenerationObserver
    ) -> ProxyResult:
        if not api_key:
            raise ConfigurationError("EverArt API key not configured")

        # 1) Submit
        obs.submit_attempted(req.prompt)
        response = await self.client.submit_generation(req.prompt, api_key)
        if not response.is_success:
            obs.submit_failed(response.status_code, response.text)
            return UpstreamError(
                status_code=response.status_code,
                body=response.content,
                media_type=response.headers.get("content-type"),
            )

        handle = self._extract_handle(response, obs)
        if handle is None:
            return UpstreamError.from_message(INVALID_UPSTREAM_RESPONSE)
        obs.job_created(handle.id)

        # 2) Poll
        final = await self._poll(handle, api_key, obs)

        # 3) Map
        if final is None:
            return Timeout()
        return Success(url=final.generation.image_url)

    def _extract_handle(
        self, response: httpx.Response, obs: GenerationObserver
    ) -> Optional[RemoteJobHandle]:
        try:
            initial = EverArtInitialResponse.model_validate_json(response.content)
        except ValidationError as e:
            obs.submit_invalid(f"unparseable body: {e.error_count()} error(s)")
            return None
        if not initial.generations:
            obs.submit_invalid("no generations returned")
            return None
        return RemoteJobHandle(id=initial.generations[0].id)

    async def _poll(
        self, handle: RemoteJobHandle, api_key: str, obs: GenerationObserver
    ) -> Optional[EverArtStatusResponse]:
        """Return the terminal-success snapshot, or None if polling gave up."""
        for attempt in range(1, self.max_attempts + 1):
            await self._sleep(self.poll_interval)
            obs.poll_attempt(handle.id, attempt)

            snapshot = await self._check_status(handle, api_key, attempt, obs)
            if snapshot is None:
                continue

            status = snapshot.generation.status if snapshot.generation else None
            obs.poll_status(handle.id, attempt, status)

            if snapshot.is_succeeded:
                obs.terminal_reached(handle.id, attempt, snapshot.generation.image_url)
                return snapshot

            if self.stop_on_remote_failure and snapshot.state is JobState.FAILED:
                obs.remote_failed(handle.id, attempt, status)
                return None

        obs.timed_out(handle.id, self.max_attempts)
        return None

    async def _check_status(
        self, handle: RemoteJobHandle, api_key: str, attempt: int, obs: GenerationObserver
    ) -> Optional[EverArtStatusResponse]:
        # Transport errors propagate to generate() and end the request.
        response = await self.client.get_generation(handle.id, api_key)

        if not response.is_success:
            obs.poll_failed(handle.id, attempt, f"HTTP {response.status_code}")
            return None

        try:
            return EverArtStatusResponse.model_validate_json(response.content)
        except ValidationError:
            obs.poll_failed(handle.id, attempt, "unparseable status body")
            return None
