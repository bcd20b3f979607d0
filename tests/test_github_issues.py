import json
from unittest.mock import patch

import pytest

import config
from actions.github_issues import (
    FINGERPRINT_MARKER,
    GithubIssueClient,
    TrackerAPIError,
)

API_BASE = "https://api.github.com"
FINGERPRINT = "abc123def456"


@pytest.fixture
def client():
    return GithubIssueClient(token="test_token", repository="owner/repo", api_base=API_BASE)


def _assert_standard_headers(headers):
    assert headers["Authorization"] == "Bearer test_token"
    assert headers["Accept"] == "application/vnd.github+json"
    assert headers["X-GitHub-Api-Version"] == "2022-11-28"
    assert headers["Content-Type"] == "application/json"
    assert headers["User-Agent"] == f"issuewatch/{config.VERSION}"


# ── find_issue ────────────────────────────────────────────────────────────

@patch("actions.github_issues.requests.get")
def test_find_issue_returns_issue_number(mock_get, client, make_response):
    mock_get.return_value = make_response(200, {"items": [{"number": 42, "title": "some issue"}]})

    assert client.find_issue(FINGERPRINT) == 42


@patch("actions.github_issues.requests.get")
def test_find_issue_search_request(mock_get, client, make_response):
    mock_get.return_value = make_response(200, {"items": []})

    client.find_issue(FINGERPRINT)

    args, kwargs = mock_get.call_args
    assert args[0] == f"{API_BASE}/search/issues"
    assert kwargs["params"] == {
        "q": f'repo:owner/repo is:issue is:open "{FINGERPRINT_MARKER}:{FINGERPRINT}" in:body',
        "per_page": 1,
    }
    assert kwargs["timeout"] == config.REQUEST_TIMEOUT_SEC
    _assert_standard_headers(kwargs["headers"])


@patch("actions.github_issues.requests.get")
def test_find_issue_no_match(mock_get, client, make_response):
    mock_get.return_value = make_response(200, {"items": []})
    assert client.find_issue(FINGERPRINT) is None


@patch("actions.github_issues.requests.get")
def test_find_issue_missing_items(mock_get, client, make_response):
    mock_get.return_value = make_response(200, {})
    assert client.find_issue(FINGERPRINT) is None


@patch("actions.github_issues.requests.get")
def test_find_issue_error_status(mock_get, client, make_response):
    mock_get.return_value = make_response(403, {"message": "Forbidden"})
    assert client.find_issue(FINGERPRINT) is None


@patch("actions.github_issues.requests.get")
def test_find_issue_malformed_body(mock_get, client, make_response):
    mock_get.return_value = make_response(200, None, text="<html>oops</html>")
    assert client.find_issue(FINGERPRINT) is None


# ── create_issue ──────────────────────────────────────────────────────────

@patch("actions.github_issues.requests.post")
def test_create_issue_returns_number(mock_post, client, make_response):
    mock_post.return_value = make_response(
        201, {"number": 7, "html_url": "https://github.com/owner/repo/issues/7"}
    )

    assert client.create_issue(title="[500] RuntimeError: oops", body="## Error\ndetails") == 7


@patch("actions.github_issues.requests.post")
def test_create_issue_request(mock_post, client, make_response):
    mock_post.return_value = make_response(201, {"number": 7})

    client.create_issue(title="my title", body="my body")

    args, kwargs = mock_post.call_args
    assert args[0] == f"{API_BASE}/repos/owner/repo/issues"
    assert kwargs["json"] == {"title": "my title", "body": "my body"}
    _assert_standard_headers(kwargs["headers"])


@patch("actions.github_issues.requests.post")
def test_create_issue_includes_labels_and_assignees(mock_post, client, make_response):
    mock_post.return_value = make_response(201, {"number": 7})

    client.create_issue(title="t", body="b", labels=["bug", "automated"], assignees=["alice"])

    payload = mock_post.call_args.kwargs["json"]
    assert payload["labels"] == ["bug", "automated"]
    assert payload["assignees"] == ["alice"]


@patch("actions.github_issues.requests.post")
def test_create_issue_omits_empty_labels_and_assignees(mock_post, client, make_response):
    mock_post.return_value = make_response(201, {"number": 7})

    client.create_issue(title="t", body="b", labels=[], assignees=[])

    payload = mock_post.call_args.kwargs["json"]
    assert "labels" not in payload
    assert "assignees" not in payload
    # Still serializable as sent
    assert json.loads(json.dumps(payload)) == {"title": "t", "body": "b"}


@patch("actions.github_issues.requests.post")
def test_create_issue_error_status_raises(mock_post, client, make_response):
    mock_post.return_value = make_response(
        422, {"message": "Validation Failed"}, text='{"message": "Validation Failed"}'
    )

    with pytest.raises(TrackerAPIError, match="create issue") as exc_info:
        client.create_issue(title="t", body="b")

    assert exc_info.value.status_code == 422
    assert "Validation Failed" in exc_info.value.body


# ── add_comment ───────────────────────────────────────────────────────────

@patch("actions.github_issues.requests.post")
def test_add_comment_returns_comment_id(mock_post, client, make_response):
    mock_post.return_value = make_response(201, {"id": 999})

    assert client.add_comment(42, body="**New occurrence:** 2026-02-26") == 999


@patch("actions.github_issues.requests.post")
def test_add_comment_request(mock_post, client, make_response):
    mock_post.return_value = make_response(201, {"id": 999})

    client.add_comment(42, body="occurrence note")

    args, kwargs = mock_post.call_args
    assert args[0] == f"{API_BASE}/repos/owner/repo/issues/42/comments"
    assert kwargs["json"] == {"body": "occurrence note"}
    _assert_standard_headers(kwargs["headers"])


@patch("actions.github_issues.requests.post")
def test_add_comment_error_status_raises(mock_post, client, make_response):
    mock_post.return_value = make_response(404, {"message": "Not Found"}, text="Not Found")

    with pytest.raises(TrackerAPIError, match="add comment"):
        client.add_comment(42, body="note")


# ── check_access ──────────────────────────────────────────────────────────

@patch("actions.github_issues.requests.get")
def test_check_access_returns_full_name(mock_get, client, make_response):
    mock_get.return_value = make_response(200, {"full_name": "owner/repo"})

    assert client.check_access() == "owner/repo"
    args, kwargs = mock_get.call_args
    assert args[0] == f"{API_BASE}/repos/owner/repo"
    _assert_standard_headers(kwargs["headers"])


@patch("actions.github_issues.requests.get")
def test_check_access_bad_credentials_raises(mock_get, client, make_response):
    mock_get.return_value = make_response(401, {"message": "Bad credentials"}, text="Bad credentials")

    with pytest.raises(TrackerAPIError) as exc_info:
        client.check_access()

    assert exc_info.value.status_code == 401
