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
import typing


def make_pull(
    number: int,
    *,
    base: str = "main",
    head_sha: str | None = None,
    auto_merge: bool = True,
    state: str = "open",
) -> dict[str, typing.Any]:
    return {
        "number": number,
        "html_url": f"https://github.com/user/repo/pull/{number}",
        "title": f"Pull request {number}",
        "state": state,
        "draft": False,
        "base": {"ref": base, "sha": "base_sha"},
        "head": {"ref": f"feature-{number}", "sha": head_sha or f"head_sha_{number}"},
        "auto_merge": (
            {"merge_method": "squash", "enabled_by": {"login": "author"}}
            if auto_merge
            else None
        ),
    }


def make_comparison(behind_by: int, ahead_by: int = 1) -> dict[str, typing.Any]:
    if behind_by == 0:
        status = "ahead" if ahead_by else "identical"
    else:
        status = "diverged" if ahead_by else "behind"
    return {"status": status, "ahead_by": ahead_by, "behind_by": behind_by}
