#
#  Copyright © 2021-2026 Mergify SAS
#
# Licensed under the Apache License, Version 2.0 (the "License"); you may
# not use this file except in compliance with the License. You may obtain
# a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
# WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the
# License for the specific language governing permissions and limitations
# under the License.

from __future__ import annotations

import json
import typing

import click
import httpx

from cascade_cli import console
from cascade_cli import exceptions
from cascade_cli import utils
from cascade_cli.cascade import api
from cascade_cli.cascade import report as report_mod


if typing.TYPE_CHECKING:
    from collections import abc

    from cascade_cli import github_types


NO_NEW_COMMITS_MESSAGE = "no new commits"


def select_candidates(
    pulls: abc.Iterable[github_types.PullRequest],
    base_branch: str,
) -> list[int]:
    """Return the numbers of the open pull requests to level, lowest first.

    Only pull requests targeting `base_branch` with auto-merge enabled are kept.
    """
    return sorted(
        pull.number
        for pull in pulls
        if pull.state == "open"
        and pull.base.ref == base_branch
        and pull.auto_merge_enabled
    )


async def list_candidates(
    client: httpx.AsyncClient,
    repository: str,
    base_branch: str,
) -> list[int]:
    pulls = await api.list_open_pulls(client, repository, base_branch)
    return select_candidates(pulls, base_branch)


async def update_branch(
    client: httpx.AsyncClient,
    repository: str,
    number: int,
    *,
    base_branch: str | None = None,
    dry_run: bool = False,
) -> report_mod.OutcomeT:
    """Merge the current base branch tip into the head of pull request `number`.

    Nothing is requested when the head already contains the base tip, so calling
    this twice in a row is the same as calling it once.

    Raises:
        ConflictError: the base cannot be merged automatically
        PermissionDeniedError: the token cannot update the branch
        NotFoundError: the pull request no longer exists
        RateLimitedError: the rate limit is still exceeded after all retries
        httpx.HTTPStatusError: GitHub answered with a server error
    """
    pull = await api.get_pull(client, repository, number)

    if pull.state != "open":
        return "skipped"
    if base_branch is not None and pull.base.ref != base_branch:
        # Retargeted since it was listed
        return "skipped"

    comparison = await api.compare(client, repository, pull.base.ref, pull.head.sha)
    if comparison.up_to_date:
        return "already-current"

    if dry_run:
        return "would-update"

    try:
        await api.request_branch_update(
            client,
            repository,
            number,
            expected_head_sha=pull.head.sha,
        )
    except exceptions.GitHubAPIError as e:
        if e.status_code == 422 and NO_NEW_COMMITS_MESSAGE in e.message.lower():
            return "already-current"
        raise

    return "updated"


async def run_cascade(
    client: httpx.AsyncClient,
    repository: str,
    base_branch: str,
    *,
    dry_run: bool = False,
) -> report_mod.CascadeReport:
    """Level every auto-merge pull request targeting `base_branch`.

    Per pull request failures are recorded and the run goes on. Only a permission
    error, or a failure to list the pull requests, stops it; it is then reported
    in `fatal_error`.
    """
    report = report_mod.CascadeReport(base_branch=base_branch, dry_run=dry_run)

    try:
        candidates = await list_candidates(client, repository, base_branch)
    except (exceptions.GitHubAPIError, httpx.HTTPError) as e:
        report.fatal_error = f"unable to list pull requests: {e}"
        return report

    if utils.is_debug():
        console.print(f"[purple]DEBUG: candidates: {candidates}[/]")

    for index, number in enumerate(candidates):
        try:
            outcome = await update_branch(
                client,
                repository,
                number,
                base_branch=base_branch,
                dry_run=dry_run,
            )
        except exceptions.PermissionDeniedError as e:
            report.add(number, "permission-denied", e.message)
            report.fatal_error = str(e)
            for remaining in candidates[index + 1 :]:
                report.add(remaining, "skipped", "run aborted")
            break
        except exceptions.ConflictError as e:
            report.add(number, "conflict", e.message)
        except exceptions.NotFoundError as e:
            report.add(number, "not-found", e.message)
        except exceptions.RateLimitedError as e:
            report.add(number, "error", f"rate limited: {e.message}")
        except (exceptions.GitHubAPIError, httpx.HTTPError) as e:
            report.add(number, "error", str(e))
        else:
            report.add(number, outcome)

    return report


async def cascade_list(
    github_server: str,
    token: str,
    repository: str,
    base_branch: str,
    *,
    output_json: bool = False,
) -> list[int]:
    async with utils.get_github_http_client(github_server, token) as client:
        candidates = await list_candidates(client, repository, base_branch)

    if output_json:
        click.echo(
            json.dumps(
                {"base_branch": base_branch, "pull_requests": candidates},
                indent=2,
            ),
        )
    elif not candidates:
        console.print(
            f"No pull request with auto-merge enabled targets `{base_branch}`",
        )
    else:
        console.print(
            f"Pull requests with auto-merge enabled targeting `[cyan]{base_branch}[/]`:",
        )
        for number in candidates:
            console.print(f"* [bold]#{number}[/]")

    return candidates


async def cascade_update(
    github_server: str,
    token: str,
    repository: str,
    base_branch: str,
    *,
    dry_run: bool = False,
    output_json: bool = False,
) -> report_mod.CascadeReport:
    async with utils.get_github_http_client(github_server, token) as client:
        report = await run_cascade(client, repository, base_branch, dry_run=dry_run)

    if output_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
    else:
        report_mod.display_report(report)

    return report
