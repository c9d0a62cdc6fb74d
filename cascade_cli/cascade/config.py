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

import fnmatch
import pathlib
import typing

import pydantic
import yaml


DEFAULT_CONFIG_PATH = ".github/cascade.yml"


class ConfigInvalidError(Exception):
    pass


class Config(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(extra="ignore")

    branches: list[str] = pydantic.Field(default_factory=lambda: ["*"])

    @pydantic.field_validator("branches", mode="before")
    @classmethod
    def _single_branch(cls, value: typing.Any) -> typing.Any:  # noqa: ANN401
        if isinstance(value, str):
            return [value]
        return value

    @pydantic.field_validator("branches")
    @classmethod
    def _not_empty(cls, value: list[str]) -> list[str]:
        if not value:
            msg = "at least one branch pattern is required"
            raise ValueError(msg)
        return value

    def watches(self, branch: str) -> bool:
        return any(fnmatch.fnmatchcase(branch, pattern) for pattern in self.branches)

    @classmethod
    def from_dict(
        cls,
        data: dict[str, typing.Any] | typing.Any,  # noqa: ANN401
    ) -> typing.Self:
        try:
            return cls.model_validate(data)
        except pydantic.ValidationError as e:
            raise ConfigInvalidError(e)

    @classmethod
    def from_yaml(cls, path: str) -> typing.Self:
        with pathlib.Path(path).open(encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigInvalidError(e)

            return cls.from_dict(data)

    @classmethod
    def load(cls, path: str) -> typing.Self:
        if not pathlib.Path(path).is_file():
            return cls()
        return cls.from_yaml(path)
