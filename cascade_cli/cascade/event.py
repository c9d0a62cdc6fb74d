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


BRANCH_REF_PREFIX = "refs/heads/"


class BaseBranchEvent(pydantic.BaseModel):
    """A `push` event: a ref now pointing to a new commit."""

    model_config = pydantic.ConfigDict(extra="ignore")

    ref: str
    after: str | None = None
    deleted: bool = False

    @property
    def branch(self) -> str | None:
        if not self.ref.startswith(BRANCH_REF_PREFIX):
            return None
        return self.ref.removeprefix(BRANCH_REF_PREFIX)
