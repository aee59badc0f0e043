# repo_stats/adapters/retryer.py
"""
Retry wrapper around a ``fetch_fn(payload, token)`` callable.

Owns backoff, jitter, the attempt cutoff and token rotation so the
request executor and the services above it stay retry-free.
"""

import logging
from typing import Any, Callable, Dict, Sequence, Set

import requests
from tenacity import (
    Retrying,
    RetryCallState,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_random_exponential
)

from repo_stats.adapters.github_api import (
    BadCredentialsError,
    RateLimitExceeded,
    TransientGraphQLError
)

logger = logging.getLogger(__name__)

FetchFn = Callable[[Dict[str, Any], str], Dict[str, Any]]

RETRYABLE_ERRORS = (
    requests.RequestException,
    TransientGraphQLError,
    RateLimitExceeded,
    BadCredentialsError,
)

# Errors that mean "this token is spent", not "the server is flaky"
ROTATE_ON = (RateLimitExceeded, BadCredentialsError)


class TenacityRetryer:
    """
    Callable retry strategy: ``retryer(fetch_fn, payload) -> response``.

    Each call starts from the first token and keeps its rotation state
    local, so concurrent or consecutive calls never share state.
    """

    def __init__(
        self,
        tokens: Sequence[str],
        max_attempts: int = 5,
        min_wait: float = 4,
        max_wait: float = 120
    ):
        if not tokens:
            raise ValueError("At least one GitHub token is required")
        self._tokens = tuple(tokens)
        self._max_attempts = max_attempts
        self._min_wait = min_wait
        self._max_wait = max_wait

    def _next_index(self, current: int, rejected: Set[int]) -> int:
        for step in range(1, len(self._tokens) + 1):
            candidate = (current + step) % len(self._tokens)
            if candidate not in rejected:
                return candidate
        return current

    def __call__(self, fetch_fn: FetchFn, payload: Dict[str, Any]) -> Dict[str, Any]:
        state = {'index': 0, 'rejected': set()}
        log_sleep = before_sleep_log(logger, logging.WARNING)

        def should_retry(error: BaseException) -> bool:
            # A rejected token is never sent again; give up once none are left
            if isinstance(error, BadCredentialsError):
                state['rejected'].add(state['index'])
                return len(state['rejected']) < len(self._tokens)
            return isinstance(error, RETRYABLE_ERRORS)

        def before_sleep(retry_state: RetryCallState) -> None:
            error = retry_state.outcome.exception()
            if isinstance(error, ROTATE_ON) and len(self._tokens) > 1:
                state['index'] = self._next_index(state['index'], state['rejected'])
                logger.warning(
                    f"{type(error).__name__}: switching to token "
                    f"{state['index'] + 1}/{len(self._tokens)}"
                )
            log_sleep(retry_state)

        retrying = Retrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_random_exponential(multiplier=2, min=self._min_wait, max=self._max_wait),
            retry=retry_if_exception(should_retry),
            before_sleep=before_sleep,
            reraise=True
        )

        for attempt in retrying:
            with attempt:
                response = fetch_fn(payload, self._tokens[state['index']])
        return response
