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
import os
import sys

import aiofiles
import pydantic

from cascade_cli import console
from cascade_cli.cascade import config as config_mod
from cascade_cli.cascade import event as event_mod
from cascade_cli.cascade import report as report_mod
from cascade_cli.cascade import updater


async def read_push_event(event_path: str) -> event_mod.BaseBranchEvent:
    async with aiofiles.open(event_path) as f:
        raw = json.loads(await f.read())
    return event_mod.BaseBranchEvent.model_validate(raw)


def _log(message: str, *, output_json: bool) -> None:
    # stdout only carries the report in JSON mode
    if not output_json:
        console.log(message)


async def cascade_github_action(
    github_server: str,
    token: str,
    repository: str,
    *,
    config_path: str,
    dry_run: bool = False,
    output_json: bool = False,
) -> report_mod.CascadeReport | None:
    for env in ("GITHUB_EVENT_NAME", "GITHUB_EVENT_PATH"):
        if env not in os.environ:
            console.log("This action only works in a GitHub Action", style="red")
            sys.exit(1)

    if os.environ["GITHUB_EVENT_NAME"] != "push":
        console.log("This action only works with `push` event", style="red")
        sys.exit(1)

    try:
        event = await read_push_event(os.environ["GITHUB_EVENT_PATH"])
    except (OSError, json.JSONDecodeError, pydantic.ValidationError) as e:
        console.print(
            f"error: invalid push event: {e}",
            style="red",
            soft_wrap=True,
            markup=False,
        )
        sys.exit(1)

    branch = event.branch
    if branch is None:
        _log(
            f"`{event.ref}` is not a branch, nothing to do",
            output_json=output_json,
        )
        return None
    if event.deleted:
        _log(
            f"Branch `{branch}` has been deleted, nothing to do",
            output_json=output_json,
        )
        return None

    try:
        config = config_mod.Config.load(config_path)
    except config_mod.ConfigInvalidError as e:
        console.print(
            f"error: invalid configuration {config_path}: {e}",
            style="red",
            soft_wrap=True,
            markup=False,
        )
        sys.exit(1)

    if not config.watches(branch):
        _log(
            f"Branch `{branch}` is not watched, nothing to do",
            output_json=output_json,
        )
        return None

    _log(
        f"Branch `{branch}` moved to {event.after or 'unknown'}",
        output_json=output_json,
    )

    report = await updater.cascade_update(
        github_server,
        token,
        repository,
        branch,
        dry_run=dry_run,
        output_json=output_json,
    )
    if not output_json:
        report_mod.annotate_github_actions(report)
    return report
