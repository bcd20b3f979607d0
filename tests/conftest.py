import pytest
from unittest.mock import MagicMock

from actions.guard_config import reset_configuration


@pytest.fixture(autouse=True)
def clean_configuration(monkeypatch):
    """Every test starts from default settings and no runtime env name"""
    monkeypatch.delenv("APP_ENV", raising=False)
    monkeypatch.delenv("FLASK_ENV", raising=False)
    reset_configuration()
    yield
    reset_configuration()


def _make_response(status_code=200, json_data=None, text=""):
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 300
    if json_data is None:
        resp.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        resp.json.return_value = json_data
    resp.text = text
    return resp


@pytest.fixture
def make_response():
    """Fake requests.Response builder"""
    return _make_response
