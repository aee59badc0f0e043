# repo_stats/adapters/github_api.py
"""
Request executor for GitHub's GraphQL API.

This adapter:
1. Issues a single POST per call with a token authorization header
2. Translates HTTP and GraphQL failures into a small exception taxonomy
3. Leaves retrying to the retryer wrapped around it
"""

import logging
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)


class GitHubAPIError(Exception):
    """Custom exception for GitHub API errors."""
    pass


class RateLimitExceeded(GitHubAPIError):
    """Raised when rate limit is exceeded."""
    pass


class BadCredentialsError(GitHubAPIError):
    """Raised when the token is rejected by GitHub."""
    pass


class TransientGraphQLError(GitHubAPIError):
    """Raised for server-side hiccups worth another attempt."""
    pass


class GitHubGraphQLAdapter:
    """
    Thin transport around one GraphQL endpoint.

    ``fetch`` matches the ``fetch_fn(payload, token)`` shape expected by
    the retryer, so the token is chosen per attempt by the caller.
    """

    def __init__(
        self,
        endpoint: str = 'https://api.github.com/graphql',
        timeout: int = 30,
        session: Optional[requests.Session] = None
    ):
        self._endpoint = endpoint
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({
            'Content-Type': 'application/json',
            'User-Agent': 'repo-stats/1.0'
        })

    @staticmethod
    def _raise_for_graphql_errors(errors: list, data: Optional[dict]) -> None:
        # GitHub reports an unresolved user/organization as a NOT_FOUND error
        # next to a partial ``data`` object; the caller interprets the nulls.
        blocking = [
            e for e in errors
            if not (data and isinstance(e, dict) and e.get('type') == 'NOT_FOUND')
        ]
        if not blocking:
            return

        error_messages = [
            e.get('message', str(e)) if isinstance(e, dict) else str(e)
            for e in blocking
        ]
        error_str = '; '.join(error_messages)

        if any(isinstance(e, dict) and e.get('type') == 'RATE_LIMITED' for e in blocking) \
                or 'rate limit' in error_str.lower():
            raise RateLimitExceeded(error_str)

        if 'timeout' in error_str.lower() or 'loading' in error_str.lower():
            logger.warning(f"Transient GraphQL error: {error_str}")
            raise TransientGraphQLError(error_str)

        raise GitHubAPIError(f"GraphQL errors: {error_str}")

    def fetch(self, payload: Dict[str, Any], token: str) -> Dict[str, Any]:
        """
        Execute one GraphQL request.

        Args:
            payload: Mapping with ``query`` and ``variables`` keys
            token: GitHub token sent as ``Authorization: token <TOKEN>``

        Returns:
            The ``data`` object of the GraphQL response

        Raises:
            BadCredentialsError: HTTP 401
            RateLimitExceeded: Rate limiting via HTTP 403/429 or GraphQL errors
            TransientGraphQLError: HTTP 502/503 or transient GraphQL errors
            GitHubAPIError: Any other failure
            requests.RequestException: Network level failures
        """
        response = self._session.post(
            self._endpoint,
            json={'query': payload['query'], 'variables': payload.get('variables', {})},
            headers={'Authorization': f'token {token}'},
            timeout=self._timeout
        )

        if response.status_code == 401:
            raise BadCredentialsError("Bad credentials")

        if response.status_code in (403, 429):
            if response.status_code == 429 or 'rate limit' in response.text.lower():
                logger.warning(f"Rate limit hit via HTTP {response.status_code}")
                raise RateLimitExceeded("Rate limit exceeded")
            raise GitHubAPIError(f"Forbidden: {response.text}")

        if response.status_code in (502, 503):
            logger.warning(f"GitHub server error ({response.status_code})")
            raise TransientGraphQLError(f"Server error: {response.status_code}")

        if response.status_code != 200:
            raise GitHubAPIError(f"API error: {response.status_code} - {response.text}")

        body = response.json()
        data = body.get('data')

        if body.get('errors'):
            self._raise_for_graphql_errors(body['errors'], data)

        return data or {}

    def close(self):
        """Clean up resources."""
        self._session.close()
        logger.debug("GitHub API adapter closed")
