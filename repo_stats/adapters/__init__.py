# adapters package
from repo_stats.adapters.github_api import (
    BadCredentialsError,
    GitHubAPIError,
    GitHubGraphQLAdapter,
    RateLimitExceeded,
    TransientGraphQLError,
)
from repo_stats.adapters.retryer import TenacityRetryer

__all__ = [
    'GitHubGraphQLAdapter',
    'GitHubAPIError',
    'RateLimitExceeded',
    'BadCredentialsError',
    'TransientGraphQLError',
    'TenacityRetryer',
]
