# repo_stats/main.py
"""
Entry point for the repository statistics fetcher.

This script:
1. Loads configuration from environment
2. Fetches metadata and commit totals for one repository
3. Prints the merged record as JSON
"""

import argparse
import json
import sys
import logging
from typing import List, Optional

from repo_stats.config.settings import GitHubConfig
from repo_stats.services.errors import MissingParamError, RepoStatsError
from repo_stats.services.repo_fetcher import RepoFetcherService

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="repo-stats",
        description="Fetch repository metadata and an author's commit totals from GitHub."
    )
    p.add_argument("username", nargs="?", default="", help="Repository owner and commit author login.")
    p.add_argument("repo", nargs="?", default="", help="Repository name.")
    p.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success, 1 for error, 2 for missing parameters)
    """
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stderr)
        ]
    )

    try:
        github_config = GitHubConfig.from_env()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    if not github_config.tokens:
        logger.error(
            "GITHUB_TOKEN environment variable not set. "
            "Set it (or GITHUB_TOKENS, comma separated) to a GitHub personal access token."
        )
        return 1

    try:
        with RepoFetcherService(github_config) as service:
            repo = service.fetch_repo(args.username, args.repo)
    except MissingParamError as e:
        logger.error(f"{e} (e.g. {e.secondary_message})")
        return 2
    except RepoStatsError as e:
        logger.error(f"Lookup failed: {e}")
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130
    except Exception as e:
        logger.exception(f"Fetch failed with error: {e}")
        return 1

    print(json.dumps(repo, indent=2))
    return 0


if __name__ == '__main__':
    sys.exit(main())
