import sys
from pathlib import Path
from typing import Any, Callable, List, Optional, Union

import httpx
import pytest

_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

BASE_URL = "https://api.everart.test"

PollItem = Union[dict, int, Exception, Callable[[], httpx.Response]]


def initial_body(*generation_ids: str) -> dict:
    return {
        "success": True,
        "generations": [
            {"id": gid, "model_id": "266497667515949056", "status": "STARTING", "type": "txt2img"}
            for gid in generation_ids
        ],
        "request_id": "req-1",
    }


def status_body(gid: str = "g1", status: str = "PROCESSING", image_url: Optional[str] = None, success: bool = True) -> dict:
    return {
        "success": success,
        "generation": {"id": gid, "status": status, "image_url": image_url},
    }


class FakeEverArt:
    """
    Stand-in for the EverArt API behind an httpx.MockTransport.

    Poll items are consumed in order; the last one repeats. A dict is returned
    as a 200 JSON body, an int as a bare status code, an exception is raised,
    a callable builds the response.
    """

    def __init__(self, submit: Any = None, polls: Optional[List[PollItem]] = None):
        self.submit = submit if submit is not None else initial_body("g1")
        self.polls: List[PollItem] = list(polls) if polls else [status_body()]
        self.submit_calls: List[httpx.Request] = []
        self.poll_calls: List[httpx.Request] = []

    @staticmethod
    def _build(item: PollItem) -> httpx.Response:
        if isinstance(item, Exception):
            raise item
        if isinstance(item, dict):
            return httpx.Response(200, json=item)
        if isinstance(item, int):
            return httpx.Response(item)
        return item()

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            self.submit_calls.append(request)
            return self._build(self.submit)
        self.poll_calls.append(request)
        idx = min(len(self.poll_calls), len(self.polls)) - 1
        return self._build(self.polls[idx])

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


class RecordingSleep:
    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def sleeper() -> RecordingSleep:
    return RecordingSleep()
