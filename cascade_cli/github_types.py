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

import pydantic


class GitRef(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(extra="ignore")

    sha: str
    ref: str


class AutoMerge(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(extra="ignore")

    merge_method: str | None = None


class PullRequest(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(extra="ignore")

    number: int
    html_url: str | None = None
    title: str | None = None
    state: str = "open"
    draft: bool = False
    base: GitRef
    head: GitRef
    auto_merge: AutoMerge | None = None

    @property
    def auto_merge_enabled(self) -> bool:
        return self.auto_merge is not None


class Comparison(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(extra="ignore")

    status: str
    ahead_by: int = 0
    behind_by: int = 0

    @property
    def up_to_date(self) -> bool:
        return self.behind_by == 0
