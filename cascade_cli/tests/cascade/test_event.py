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
import json
import pathlib

import pydantic
import pytest

from cascade_cli.cascade import event as event_mod


PUSH_EVENT = pathlib.Path(__file__).parent / "push_event.json"


def test_parse_real_push_event() -> None:
    raw = json.loads(PUSH_EVENT.read_bytes())
    event = event_mod.BaseBranchEvent.model_validate(raw)

    assert event.ref == "refs/heads/main"
    assert event.branch == "main"
    assert event.after == "10068d193546082d802676bb310a570d0898e061"
    assert not event.deleted


@pytest.mark.parametrize(
    ("ref", "branch"),
    [
        ("refs/heads/main", "main"),
        ("refs/heads/release/1.2", "release/1.2"),
        ("refs/tags/v1.0.0", None),
    ],
)
def test_branch(ref: str, branch: str | None) -> None:
    assert event_mod.BaseBranchEvent(ref=ref).branch == branch


def test_parse_deleted_branch() -> None:
    event = event_mod.BaseBranchEvent.model_validate(
        {
            "ref": "refs/heads/feature",
            "after": "0000000000000000000000000000000000000000",
            "deleted": True,
        },
    )
    assert event.deleted


def test_parse_event_missing_ref() -> None:
    with pytest.raises(pydantic.ValidationError, match="ref"):
        event_mod.BaseBranchEvent.model_validate({"after": "abc"})
