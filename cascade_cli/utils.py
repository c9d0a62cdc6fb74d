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

import asyncio
import dataclasses
import functools
import time
import typing
from urllib import parse

import httpx

from cascade_cli import VERSION
from cascade_cli import console
from cascade_cli import exceptions


_DEBUG = False


def set_debug(debug: bool) -> None:
    global _DEBUG  # noqa: PLW0603
    _DEBUG = debug


def is_debug() -> bool:
    return _DEBUG


def _get_error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text

    if not isinstance(data, dict):
        return str(data)

    message = str(data.get("message", ""))
    if "errors" in data:
        details = "\n".join(
            f"* {e.get('message') or e}" if isinstance(e, dict) else f"* {e}"
            for e in data["errors"]
        )
        message = f"{message}\n{details}"
    return message


def _get_retry_after(response: httpx.Response) -> float | None:
    retry_after = response.headers.get("retry-after")
    if retry_after is not None:
        try:
            return max(float(retry_after), 0.0)
        except ValueError:
            return None

    reset = response.headers.get("x-ratelimit-reset")
    if reset is not None:
        try:
            return max(float(reset) - time.time(), 0.0)
        except ValueError:
            return None

    return None


def _is_rate_limited(response: httpx.Response, message: str) -> bool:
    if response.status_code == 429:
        return True
    if response.status_code != 403:
        return False
    return (
        response.headers.get("x-ratelimit-remaining") == "0"
        or "retry-after" in response.headers
        or "rate limit" in message.lower()
    )


async def check_for_status(response: httpx.Response) -> None:
    if response.status_code < 400:
        return

    if response.status_code < 500:
        await response.aread()
        message = _get_error_message(response)
        url = str(response.request.url)

        if is_debug():
            console.print(f"[purple]DEBUG: url: {url}[/]")
            console.print(
                f"[purple]DEBUG: data: {response.request.content.decode()}[/]",
            )
            console.print(
                f"[purple]DEBUG: HTTPError {response.status_code}: {message}[/]",
            )

        if _is_rate_limited(response, message):
            raise exceptions.RateLimitedError(
                response.status_code,
                url,
                message,
                retry_after=_get_retry_after(response),
            )
        if response.status_code in {401, 403}:
            raise exceptions.PermissionDeniedError(
                response.status_code,
                url,
                message,
            )
        if response.status_code == 404:
            raise exceptions.NotFoundError(response.status_code, url, message)
        if response.status_code == 422 and "merge conflict" in message.lower():
            raise exceptions.ConflictError(response.status_code, url, message)
        raise exceptions.GitHubAPIError(response.status_code, url, message)

    response.raise_for_status()


@dataclasses.dataclass
class CommandError(Exception):
    command_args: tuple[str, ...]
    returncode: int | None
    stdout: bytes

    def __str__(self) -> str:
        return f"failed to run `{' '.join(self.command_args)}`: {self.stdout.decode()}"


async def run_command(*args: str) -> str:
    if is_debug():
        console.print(f"[purple]DEBUG: running: {' '.join(args)} [/]")
    proc = await asyncio.create_subprocess_exec(
        *args,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.STDOUT,
    )
    stdout, _ = await proc.communicate()
    if proc.returncode != 0:
        raise CommandError(args, proc.returncode, stdout)
    return stdout.decode().strip()


async def git(*args: str) -> str:
    return await run_command("git", *args)


def get_slug(url: str) -> tuple[str, str]:
    parsed = parse.urlparse(url)
    if not parsed.netloc:
        # Probably ssh
        _, _, path = parsed.path.partition(":")
    else:
        path = parsed.path[1:].rstrip("/")

    user, repo = path.split("/", 1)
    repo = repo.removesuffix(".git")
    return user, repo


# NOTE: must be async for httpx
async def log_httpx_request(request: httpx.Request) -> None:  # noqa: RUF029
    console.print(
        f"[purple]DEBUG: request: {request.method} {request.url} - Waiting for response[/]",
    )


# NOTE: must be async for httpx
async def log_httpx_response(response: httpx.Response) -> None:
    request = response.request
    await response.aread()
    elapsed = response.elapsed.total_seconds()
    console.print(
        f"[purple]DEBUG: response: {request.method} {request.url} - Status {response.status_code} - Elapsed {elapsed} s[/]",
    )


def get_github_http_client(github_server: str, token: str) -> httpx.AsyncClient:
    event_hooks: typing.Mapping[str, list[typing.Callable[..., typing.Any]]] = {
        "request": [],
        "response": [check_for_status],
    }
    if is_debug():
        event_hooks["request"].insert(0, log_httpx_request)
        event_hooks["response"].insert(0, log_httpx_response)

    return httpx.AsyncClient(
        base_url=github_server,
        headers={
            "Accept": "application/vnd.github+json",
            "User-Agent": f"cascade_cli/{VERSION}",
            "Authorization": f"token {token}",
            "X-GitHub-Api-Version": "2022-11-28",
        },
        event_hooks=event_hooks,
        follow_redirects=True,
        timeout=10.0,
    )


P = typing.ParamSpec("P")
R = typing.TypeVar("R")


def run_with_asyncio(
    func: typing.Callable[
        P,
        typing.Coroutine[typing.Any, typing.Any, R],
    ],
) -> functools._Wrapped[
    P,
    typing.Coroutine[typing.Any, typing.Any, R],
    P,
    R,
]:
    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        result = func(*args, **kwargs)
        return asyncio.run(result)

    return wrapper
