"""Unit tests for repo_stats.adapters.retryer covering retries, exhaustion and token rotation."""

from unittest.mock import MagicMock

import pytest
import requests

from repo_stats.adapters.github_api import (
    BadCredentialsError,
    GitHubAPIError,
    RateLimitExceeded,
    TransientGraphQLError,
)
from repo_stats.adapters.retryer import TenacityRetryer


def _retryer(tokens=("t1",), max_attempts=3):
    return TenacityRetryer(tokens, max_attempts=max_attempts, min_wait=0, max_wait=0)


def test_success_on_first_attempt_passes_payload_and_token():
    fetch = MagicMock(return_value={"ok": True})
    assert _retryer()(fetch, {"query": "q"}) == {"ok": True}
    fetch.assert_called_once_with({"query": "q"}, "t1")


@pytest.mark.parametrize("error", [requests.ConnectionError("down"), requests.Timeout("slow"), TransientGraphQLError("502")])
def test_transient_errors_are_retried(error):
    fetch = MagicMock(side_effect=[error, {"ok": True}])
    assert _retryer()(fetch, {}) == {"ok": True}
    assert fetch.call_count == 2


def test_exhausted_attempts_reraise_last_error():
    fetch = MagicMock(side_effect=requests.ConnectionError("down"))
    with pytest.raises(requests.ConnectionError):
        _retryer(max_attempts=3)(fetch, {})
    assert fetch.call_count == 3


def test_non_transient_error_is_not_retried():
    fetch = MagicMock(side_effect=GitHubAPIError("GraphQL errors: bad field"))
    with pytest.raises(GitHubAPIError):
        _retryer()(fetch, {})
    assert fetch.call_count == 1


@pytest.mark.parametrize("error", [RateLimitExceeded("limit"), BadCredentialsError("bad")])
def test_spent_token_rotates_to_next(error):
    fetch = MagicMock(side_effect=[error, {"ok": True}])
    assert _retryer(tokens=("t1", "t2"))(fetch, {}) == {"ok": True}
    assert [call.args[1] for call in fetch.call_args_list] == ["t1", "t2"]


def test_rotation_wraps_around():
    fetch = MagicMock(side_effect=[RateLimitExceeded("a"), RateLimitExceeded("b"), {"ok": True}])
    _retryer(tokens=("t1", "t2"))(fetch, {})
    assert [call.args[1] for call in fetch.call_args_list] == ["t1", "t2", "t1"]


def test_transient_errors_keep_current_token():
    fetch = MagicMock(side_effect=[requests.ConnectionError("down"), {"ok": True}])
    _retryer(tokens=("t1", "t2"))(fetch, {})
    assert [call.args[1] for call in fetch.call_args_list] == ["t1", "t1"]


def test_each_call_starts_from_first_token():
    retryer = _retryer(tokens=("t1", "t2"))
    retryer(MagicMock(side_effect=[RateLimitExceeded("a"), {}]), {})
    fetch = MagicMock(return_value={})
    retryer(fetch, {})
    fetch.assert_called_once_with({}, "t1")


def test_requires_a_token():
    with pytest.raises(ValueError):
        TenacityRetryer(())


def test_single_rejected_token_is_not_retried():
    fetch = MagicMock(side_effect=BadCredentialsError("Bad credentials"))
    with pytest.raises(BadCredentialsError):
        TenacityRetryer(("only",), max_attempts=5, min_wait=0, max_wait=0)(fetch, {})
    assert fetch.call_count == 1


def test_gives_up_once_every_token_is_rejected():
    fetch = MagicMock(side_effect=BadCredentialsError("Bad credentials"))
    with pytest.raises(BadCredentialsError):
        _retryer(tokens=("t1", "t2"), max_attempts=5)(fetch, {})
    assert [call.args[1] for call in fetch.call_args_list] == ["t1", "t2"]


def test_rotation_skips_rejected_tokens():
    fetch = MagicMock(side_effect=[
        BadCredentialsError("bad"),
        RateLimitExceeded("limit"),
        RateLimitExceeded("limit"),
        {"ok": True},
    ])
    assert _retryer(tokens=("t1", "t2", "t3"), max_attempts=5)(fetch, {}) == {"ok": True}
    assert [call.args[1] for call in fetch.call_args_list] == ["t1", "t2", "t3", "t2"]
