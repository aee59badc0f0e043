# repo_stats/config/settings.py
import os
from dataclasses import dataclass
from typing import Tuple


def _split_tokens(raw: str) -> Tuple[str, ...]:
    return tuple(token.strip() for token in raw.split(',') if token.strip())


@dataclass(frozen=True)  # Immutable configuration
class GitHubConfig:
    tokens: Tuple[str, ...]
    graphql_endpoint: str = 'https://api.github.com/graphql'
    request_timeout: int = 30
    max_attempts: int = 5
    retry_min_wait: float = 4
    retry_max_wait: float = 120

    @property
    def token(self) -> str:
        """Primary token, empty when none is configured."""
        return self.tokens[0] if self.tokens else ''

    @classmethod
    def from_env(cls) -> 'GitHubConfig':
        # GITHUB_TOKENS (comma separated) takes precedence over GITHUB_TOKEN
        tokens = _split_tokens(os.getenv('GITHUB_TOKENS', ''))
        if not tokens:
            tokens = _split_tokens(os.getenv('GITHUB_TOKEN', ''))
        return cls(
            tokens=tokens,
            graphql_endpoint=os.getenv('GITHUB_GRAPHQL_ENDPOINT', 'https://api.github.com/graphql'),
            request_timeout=int(os.getenv('GITHUB_REQUEST_TIMEOUT', '30')),
            max_attempts=int(os.getenv('GITHUB_MAX_RETRIES', '5')),
            retry_min_wait=float(os.getenv('GITHUB_RETRY_MIN_WAIT', '4')),
            retry_max_wait=float(os.getenv('GITHUB_RETRY_MAX_WAIT', '120'))
        )
