import pytest
from pydantic import ValidationError

from imageproxy.model import EverArtStatusResponse, JobState, UpstreamError


def _status(status, image_url=None, success=True):
    return EverArtStatusResponse.model_validate(
        {"success": success, "generation": {"id": "g1", "status": status, "image_url": image_url}}
    )


@pytest.mark.parametrize(
    "remote,expected",
    [
        ("STARTING", JobState.PENDING),
        ("PROCESSING", JobState.PENDING),
        ("SOMETHING_NEW", JobState.PENDING),
        ("SUCCEEDED", JobState.SUCCEEDED),
        ("FAILED", JobState.FAILED),
        ("CANCELED", JobState.FAILED),
    ],
)
def test_remote_status_vocabulary(remote, expected):
    assert _status(remote).state is expected


def test_missing_generation_is_pending():
    snap = EverArtStatusResponse.model_validate({"success": True})
    assert snap.state is JobState.PENDING
    assert not snap.is_succeeded


def test_state_and_success_agree_on_case():
    snap = _status("succeeded", "https://x/y.png")
    assert snap.state is JobState.PENDING
    assert not snap.is_succeeded


def test_success_needs_flag_status_and_url():
    assert _status("SUCCEEDED", "https://x/y.png").is_succeeded
    assert not _status("SUCCEEDED", "").is_succeeded
    assert not _status("SUCCEEDED", "https://x/y.png", success=False).is_succeeded
    assert not _status("PROCESSING", "https://x/y.png").is_succeeded


def test_snapshots_are_immutable():
    snap = _status("PROCESSING")
    with pytest.raises(ValidationError):
        snap.success = False


def test_unknown_fields_are_ignored():
    snap = EverArtStatusResponse.model_validate_json(
        '{"success": true, "generation": {"id": "g1", "status": "SUCCEEDED",'
        ' "image_url": "https://x/y.png", "seed": 7}, "extra": 1}'
    )
    assert snap.is_succeeded


def test_upstream_error_from_message():
    err = UpstreamError.from_message("boom")
    assert err.status_code == 500
    assert err.body == b'{"error": "boom"}'
    assert err.media_type == "application/json"
