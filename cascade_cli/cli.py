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
import os

import click
import click_default_group

from cascade_cli import VERSION
from cascade_cli import console
from cascade_cli import utils
from cascade_cli.cascade import cli as cascade_cli_mod


async def _get_default_token() -> str | None:
    token = os.environ.get("CASCADE_TOKEN") or os.environ.get("GITHUB_TOKEN")
    if not token:
        try:
            token = await utils.run_command("gh", "auth", "token")
        except (utils.CommandError, FileNotFoundError):
            console.print(
                "error: please set the 'CASCADE_TOKEN' or 'GITHUB_TOKEN' environment variable, "
                "or make sure that gh client is installed and you are authenticated",
                style="red",
            )
            return None
    return token


async def _get_default_repository() -> str | None:
    repo = os.environ.get("GITHUB_REPOSITORY")
    if repo:
        return repo

    try:
        remote_url = await utils.git(
            "config",
            "--get",
            "remote.origin.url",
        )
    except (utils.CommandError, FileNotFoundError):
        return None

    try:
        user, repo_name = utils.get_slug(remote_url)
    except (ValueError, IndexError):
        return None

    return f"{user}/{repo_name}"


@click.group(
    cls=click_default_group.DefaultGroup,
    default="github-action",
    default_if_no_args=True,
    help="Keep auto-merge pull requests up to date with their base branch",
)
@click.option("--debug", is_flag=True, default=False, help="debug mode")
@click.option(
    "--token",
    "-t",
    help="GitHub token",
    envvar=["CASCADE_TOKEN", "GITHUB_TOKEN"],
    required=True,
    default=lambda: asyncio.run(_get_default_token()),
)
@click.option(
    "--github-server",
    "-s",
    help="URL of the GitHub API",
    envvar="GITHUB_API_URL",
    default="https://api.github.com",
    show_default=True,
)
@click.option(
    "--repository",
    "-r",
    help="Repository full name (owner/repo)",
    required=True,
    default=lambda: asyncio.run(_get_default_repository()),
)
@click.version_option(VERSION)
@click.pass_context
def cli(
    ctx: click.Context,
    *,
    debug: bool,
    token: str,
    github_server: str,
    repository: str,
) -> None:
    utils.set_debug(debug)
    ctx.ensure_object(dict)
    ctx.obj["token"] = token
    ctx.obj["github_server"] = github_server
    ctx.obj["repository"] = repository


cli.add_command(cascade_cli_mod.list_cmd)
cli.add_command(cascade_cli_mod.update)
cli.add_command(cascade_cli_mod.github_action)


def main() -> None:
    cli()
