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

import dataclasses


@dataclasses.dataclass
class GitHubAPIError(Exception):
    status_code: int
    url: str
    message: str

    def __str__(self) -> str:
        return f"HTTPError {self.status_code}: {self.message} ({self.url})"


class ConflictError(GitHubAPIError):
    pass


class PermissionDeniedError(GitHubAPIError):
    pass


class NotFoundError(GitHubAPIError):
    pass


@dataclasses.dataclass
class RateLimitedError(GitHubAPIError):
    retry_after: float | None = None
