"""Pull-request enrichment and filtering on top of the GitHub client.

This module assembles the ``list-pull-requests`` result:
- list every pull request with full detail
- optionally attach the merged comment stream (failures propagate)
- optionally attach check runs and commit statuses (failures degrade to empty)
- filter the enriched list by state
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import List

from .github_client import GitHubClient
from .models import PullRequestRecord

logger = logging.getLogger(__name__)

VALID_STATES = ("open", "closed", "all")


def filter_by_state(pull_requests: List[PullRequestRecord], state: str) -> List[PullRequestRecord]:
    """Keep only pull requests whose ``state`` matches; ``all`` keeps everything.

    The listing request already passes ``state`` upstream. The filter is
    applied again on the enriched list so both stages must agree.
    """
    if state == "open":
        return [pr for pr in pull_requests if pr.state == "open"]
    if state == "closed":
        return [pr for pr in pull_requests if pr.state == "closed"]
    return list(pull_requests)


def enrich_pull_request(
    client: GitHubClient,
    owner: str,
    repo: str,
    pr: PullRequestRecord,
    include_comments: bool,
    include_checks: bool,
) -> PullRequestRecord:
    """Return a copy of ``pr`` carrying the requested secondary data."""
    enriched = pr

    if include_comments:
        comments = client.get_pull_request_comments(owner, repo, pr.number)
        enriched = replace(enriched, comments_list=tuple(comments))

    if include_checks:
        check_runs, statuses = client.get_ci_state(owner, repo, pr.head.sha)
        enriched = replace(enriched, check_runs=tuple(check_runs), statuses=tuple(statuses))

    return enriched


def collect_pull_requests(
    client: GitHubClient,
    owner: str,
    repo: str,
    state: str = "all",
    include_comments: bool = False,
    include_checks: bool = False,
) -> List[PullRequestRecord]:
    """List, enrich and filter the pull requests of ``owner/repo``.

    Pull requests are enriched one at a time in the order GitHub listed them
    (most recently updated first); the order is never re-sorted.
    """
    pull_requests = client.list_pull_requests(owner, repo, state)

    enriched = [
        enrich_pull_request(
            client,
            owner,
            repo,
            pr,
            include_comments=include_comments,
            include_checks=include_checks,
        )
        for pr in pull_requests
    ]

    filtered = filter_by_state(enriched, state)

    logger.info(
        "Collected pull requests",
        extra={
            "repository": f"{owner}/{repo}",
            "state": state,
            "listed": len(pull_requests),
            "returned": len(filtered),
            "include_comments": include_comments,
            "include_checks": include_checks,
        },
    )
    return filtered
