"""Tests for the GitHub REST client (HTTP is mocked)."""
import unittest.mock as mock

import pytest
import requests

from migrascope.github.api import GitHubAPIError, GitHubClient


def _response(status=200, json_body=None, text="", headers=None):
    resp = mock.Mock()
    resp.status_code = status
    resp.json.return_value = json_body if json_body is not None else {}
    resp.text = text
    resp.headers = headers or {}
    return resp


def _client(*responses):
    session = mock.Mock()
    session.headers = {}
    session.get.side_effect = list(responses)
    return GitHubClient("t0ken", session=session), session


def test_auth_headers_are_set():
    client, session = _client()
    assert session.headers["Authorization"] == "Bearer t0ken"
    assert session.headers["Accept"] == "application/vnd.github+json"
    assert session.headers["X-GitHub-Api-Version"] == "2022-11-28"


def test_compare_commits_url():
    client, session = _client(_response(json_body={"files": []}))
    assert client.compare_commits("acme", "shop", "abc", "def") == {"files": []}
    url = session.get.call_args[0][0]
    assert url == "https://api.github.com/repos/acme/shop/compare/abc...def"


def test_get_commit_url():
    client, session = _client(_response(json_body={"sha": "def"}))
    client.get_commit("acme", "shop", "def")
    assert session.get.call_args[0][0] == "https://api.github.com/repos/acme/shop/commits/def"


def test_non_200_raises_with_status():
    client, _ = _client(_response(status=404, text="Not Found"))
    with pytest.raises(GitHubAPIError) as exc:
        client.get_commit("acme", "shop", "missing")
    assert exc.value.status == 404
    assert "expected 200" in str(exc.value)


def test_transport_errors_are_retried():
    client, session = _client(
        requests.exceptions.ConnectionError("reset"),
        _response(json_body={"files": []}),
    )
    with mock.patch("migrascope.github.api.time.sleep") as sleep:
        assert client.get("repos/acme/shop/commits/x") == {"files": []}
    assert session.get.call_count == 2
    sleep.assert_called_once_with(2)


def test_transport_errors_give_up_after_max_retries():
    err = requests.exceptions.Timeout("slow")
    client, session = _client(err, err, err)
    with mock.patch("migrascope.github.api.time.sleep"):
        with pytest.raises(GitHubAPIError, match="failed"):
            client.get("repos/acme/shop/commits/x")
    assert session.get.call_count == 3


def test_rate_limited_request_is_retried():
    limited = _response(status=403, text="API rate limit exceeded",
                        headers={"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": "0"})
    client, session = _client(limited, _response(json_body={"ok": True}))
    with mock.patch("migrascope.github.api.time.sleep") as sleep:
        assert client.get("rate") == {"ok": True}
    assert sleep.call_count == 1
    assert session.get.call_count == 2
