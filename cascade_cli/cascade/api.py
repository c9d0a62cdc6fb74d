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

import typing

import httpx
import tenacity

from cascade_cli import exceptions
from cascade_cli import github_types


MAX_RETRY_WAIT = 60.0
MAX_ATTEMPTS = 5

_exponential_wait = tenacity.wait_exponential(multiplier=0.2)


def _wait_for_rate_limit(retry_state: tenacity.RetryCallState) -> float:
    if retry_state.outcome is not None:
        exc = retry_state.outcome.exception()
        if (
            isinstance(exc, exceptions.RateLimitedError)
            and exc.retry_after is not None
        ):
            return min(exc.retry_after, MAX_RETRY_WAIT)
    return _exponential_wait(retry_state)


retry_github_call = tenacity.retry(
    wait=_wait_for_rate_limit,
    stop=tenacity.stop_after_attempt(MAX_ATTEMPTS),
    retry=tenacity.retry_if_exception_type(
        (exceptions.RateLimitedError, httpx.TransportError),
    ),
    reraise=True,
)


@retry_github_call
async def _get(
    client: httpx.AsyncClient,
    url: str,
    params: dict[str, typing.Any] | None = None,
) -> httpx.Response:
    return await client.get(url, params=params)


async def list_open_pulls(
    client: httpx.AsyncClient,
    repository: str,
    base_branch: str,
) -> list[github_types.PullRequest]:
    pulls: list[github_types.PullRequest] = []
    url: str | None = f"/repos/{repository}/pulls"
    params: dict[str, typing.Any] | None = {
        "state": "open",
        "base": base_branch,
        "per_page": 100,
    }
    while url is not None:
        response = await _get(client, url, params=params)
        pulls.extend(
            github_types.PullRequest.model_validate(pull) for pull in response.json()
        )
        next_link = response.links.get("next")
        url = next_link["url"] if next_link else None
        # NOTE: the next link already carries the query string
        params = None
    return pulls


async def get_pull(
    client: httpx.AsyncClient,
    repository: str,
    number: int,
) -> github_types.PullRequest:
    response = await _get(client, f"/repos/{repository}/pulls/{number}")
    return github_types.PullRequest.model_validate(response.json())


async def compare(
    client: httpx.AsyncClient,
    repository: str,
    base: str,
    head: str,
) -> github_types.Comparison:
    response = await _get(client, f"/repos/{repository}/compare/{base}...{head}")
    return github_types.Comparison.model_validate(response.json())


@retry_github_call
async def request_branch_update(
    client: httpx.AsyncClient,
    repository: str,
    number: int,
    *,
    expected_head_sha: str,
) -> None:
    await client.put(
        f"/repos/{repository}/pulls/{number}/update-branch",
        json={"expected_head_sha": expected_head_sha},
    )
