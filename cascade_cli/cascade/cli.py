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

import sys

import click
import httpx

from cascade_cli import console
from cascade_cli import exceptions
from cascade_cli import utils
from cascade_cli.cascade import config as config_mod
from cascade_cli.cascade import github_action as github_action_mod
from cascade_cli.cascade import updater


def _process_branch(
    _ctx: click.Context,
    _param: click.Parameter,
    value: str | None,
) -> str | None:
    """Strip the refs/heads/ prefix when the branch comes from GITHUB_REF."""
    if value is None:
        return value
    branch = value.removeprefix("refs/heads/")
    if not branch:
        msg = "Branch name must not be empty"
        raise click.BadParameter(msg)
    return branch


branch_option = click.option(
    "--branch",
    "-b",
    help="Base branch whose pull requests are updated",
    required=True,
    envvar="CASCADE_BRANCH",
    callback=_process_branch,
)
dry_run_option = click.option(
    "--dry-run",
    "-n",
    is_flag=True,
    default=False,
    help="Compare branches but do not update them",
)
json_option = click.option(
    "--json",
    "output_json",
    is_flag=True,
    help="Output in JSON format",
)


@click.command(
    name="list",
    help="List the pull requests with auto-merge enabled targeting a branch",
)
@branch_option
@json_option
@click.pass_context
@utils.run_with_asyncio
async def list_cmd(ctx: click.Context, *, branch: str, output_json: bool) -> None:
    try:
        await updater.cascade_list(
            ctx.obj["github_server"],
            ctx.obj["token"],
            ctx.obj["repository"],
            branch,
            output_json=output_json,
        )
    except (exceptions.GitHubAPIError, httpx.HTTPError) as e:
        console.print(f"error: {e}", style="red", soft_wrap=True, markup=False)
        sys.exit(1)


@click.command(
    help="Update the branch of every auto-merge pull request targeting a branch",
)
@branch_option
@dry_run_option
@json_option
@click.pass_context
@utils.run_with_asyncio
async def update(
    ctx: click.Context,
    *,
    branch: str,
    dry_run: bool,
    output_json: bool,
) -> None:
    report = await updater.cascade_update(
        ctx.obj["github_server"],
        ctx.obj["token"],
        ctx.obj["repository"],
        branch,
        dry_run=dry_run,
        output_json=output_json,
    )
    if report.fatal_error is not None:
        sys.exit(1)


@click.command(
    name="github-action",
    help="Update the pull requests of the branch pushed in a GitHub Action `push` event",
)
@click.option(
    "--config",
    "config_path",
    help="Path of the YAML file listing the watched branches",
    default=config_mod.DEFAULT_CONFIG_PATH,
    envvar="CASCADE_CONFIG",
    show_default=True,
)
@dry_run_option
@json_option
@click.pass_context
@utils.run_with_asyncio
async def github_action(
    ctx: click.Context,
    *,
    config_path: str,
    dry_run: bool,
    output_json: bool,
) -> None:
    report = await github_action_mod.cascade_github_action(
        ctx.obj["github_server"],
        ctx.obj["token"],
        ctx.obj["repository"],
        config_path=config_path,
        dry_run=dry_run,
        output_json=output_json,
    )
    if report is not None and report.fatal_error is not None:
        sys.exit(1)
