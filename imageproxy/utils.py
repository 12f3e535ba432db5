import time
import uuid


def gen_request_id() -> str:
    return uuid.uuid4().hex[:12]


def get_timestamp_ms() -> int:
    return int(time.time() * 1000)
