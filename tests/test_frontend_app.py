from pathlib import Path

from streamlit.testing.v1 import AppTest

APP_PATH = str(Path(__file__).resolve().parents[1] / "frontend" / "app.py")


def test_history_renders_two_downloads_from_the_same_second():
    at = AppTest.from_file(APP_PATH)
    at.session_state["messages"] = [
        {"role": "assistant", "content": "first", "download_data": b"png-1", "timestamp": "20260101_120000"},
        {"role": "assistant", "content": "second", "download_data": b"png-2", "timestamp": "20260101_120000"},
    ]
    at.run()

    assert not at.exception
    assert len(at.get("download_button")) == 2
