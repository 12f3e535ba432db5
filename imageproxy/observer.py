import logging
from typing import Optional

logger = logging.getLogger("imageproxy.orchestrator")


class GenerationObserver:
    """
    Hooks called by the orchestrator at each state transition.

    The base class does nothing; subclass it to log, count or record.
    """

    def submit_attempted(self, prompt: str) -> None:
        pass

    def submit_failed(self, status_code: int, body: str) -> None:
        pass

    def submit_invalid(self, reason: str) -> None:
        pass

    def job_created(self, generation_id: str) -> None:
        pass

    def poll_attempt(self, generation_id: str, attempt: int) -> None:
        pass

    def poll_failed(self, generation_id: str, attempt: int, reason: str) -> None:
        pass

    def poll_status(self, generation_id: str, attempt: int, status: Optional[str]) -> None:
        pass

    def terminal_reached(self, generation_id: str, attempt: int, image_url: str) -> None:
        pass

    def remote_failed(self, generation_id: str, attempt: int, status: Optional[str]) -> None:
        pass

    def timed_out(self, generation_id: str, attempts: int) -> None:
        pass

    def fault(self, error: BaseException) -> None:
        pass


class LoggingObserver(GenerationObserver):
    """Writes one log line per transition, tagged with the request id."""

    def __init__(self, request_id: str = "-", log: Optional[logging.Logger] = None):
        self.request_id = request_id
        self.log = log or logger

    def submit_attempted(self, prompt: str) -> None:
        self.log.info("[%s] submitting generation, prompt=%r", self.request_id, prompt[:80])

    def submit_failed(self, status_code: int, body: str) -> None:
        self.log.warning(
            "[%s] submission rejected, status=%s body=%s", self.request_id, status_code, body[:500]
        )

    def submit_invalid(self, reason: str) -> None:
        self.log.error("[%s] invalid submission response: %s", self.request_id, reason)

    def job_created(self, generation_id: str) -> None:
        self.log.info("[%s] generation id=%s", self.request_id, generation_id)

    def poll_attempt(self, generation_id: str, attempt: int) -> None:
        self.log.debug("[%s] polling %s (attempt %d)", self.request_id, generation_id, attempt)

    def poll_failed(self, generation_id: str, attempt: int, reason: str) -> None:
        self.log.warning(
            "[%s] status check failed for %s (attempt %d): %s",
            self.request_id,
            generation_id,
            attempt,
            reason,
        )

    def poll_status(self, generation_id: str, attempt: int, status: Optional[str]) -> None:
        self.log.debug(
            "[%s] %s status=%s (attempt %d)", self.request_id, generation_id, status, attempt
        )

    def terminal_reached(self, generation_id: str, attempt: int, image_url: str) -> None:
        self.log.info(
            "[%s] generation %s complete after %d polls, url=%s",
            self.request_id,
            generation_id,
            attempt,
            image_url,
        )

    def remote_failed(self, generation_id: str, attempt: int, status: Optional[str]) -> None:
        self.log.warning(
            "[%s] generation %s reported %s (attempt %d), giving up",
            self.request_id,
            generation_id,
            status,
            attempt,
        )

    def timed_out(self, generation_id: str, attempts: int) -> None:
        self.log.error(
            "[%s] generation %s not finished after %d polls", self.request_id, generation_id, attempts
        )

    def fault(self, error: BaseException) -> None:
        self.log.error("[%s] unexpected error: %s", self.request_id, error, exc_info=error)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
