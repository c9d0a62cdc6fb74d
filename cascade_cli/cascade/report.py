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

import collections
import dataclasses
import typing

from rich.markup import escape
from rich.table import Table

from cascade_cli import console


OutcomeT = typing.Literal[
    "updated",
    "would-update",
    "already-current",
    "conflict",
    "not-found",
    "permission-denied",
    "error",
    "skipped",
]

_OUTCOME_DISPLAY: dict[OutcomeT, tuple[str, str]] = {
    "updated": ("updated", "green"),
    "would-update": ("would update", "cyan"),
    "already-current": ("already current", "dim"),
    "conflict": ("conflict", "red"),
    "not-found": ("not found", "yellow"),
    "permission-denied": ("permission denied", "bold red"),
    "error": ("error", "red"),
    "skipped": ("skipped", "yellow"),
}

FAILED_OUTCOMES: frozenset[OutcomeT] = frozenset(
    {"conflict", "permission-denied", "error"},
)


@dataclasses.dataclass
class CascadeEntry:
    """Outcome of the branch update of a single pull request."""

    number: int
    outcome: OutcomeT
    message: str | None = None

    def to_dict(self) -> dict[str, typing.Any]:
        return {
            "number": self.number,
            "outcome": self.outcome,
            "message": self.message,
        }


@dataclasses.dataclass
class CascadeReport:
    """Summary of one cascade run against a base branch."""

    base_branch: str
    dry_run: bool = False
    entries: list[CascadeEntry] = dataclasses.field(default_factory=list)
    fatal_error: str | None = None

    def add(
        self,
        number: int,
        outcome: OutcomeT,
        message: str | None = None,
    ) -> None:
        self.entries.append(CascadeEntry(number, outcome, message))

    def counts(self) -> dict[OutcomeT, int]:
        return dict(collections.Counter(entry.outcome for entry in self.entries))

    @property
    def failed(self) -> list[CascadeEntry]:
        return [entry for entry in self.entries if entry.outcome in FAILED_OUTCOMES]

    def to_dict(self) -> dict[str, typing.Any]:
        return {
            "base_branch": self.base_branch,
            "dry_run": self.dry_run,
            "fatal_error": self.fatal_error,
            "entries": [entry.to_dict() for entry in self.entries],
        }


def display_report(report: CascadeReport) -> None:
    title = f"Cascade on `{report.base_branch}`"
    if report.dry_run:
        title += " (dry run)"

    if not report.entries:
        console.print(
            f"No pull request with auto-merge enabled targets `{report.base_branch}`",
        )
    else:
        table = Table(title=title)
        table.add_column("Pull request", style="bold")
        table.add_column("Outcome")
        table.add_column("Details", overflow="fold")

        for entry in report.entries:
            text, color = _OUTCOME_DISPLAY[entry.outcome]
            table.add_row(
                f"#{entry.number}",
                f"[{color}]{text}[/]",
                escape(entry.message or ""),
            )

        console.print(table)

    if report.fatal_error is not None:
        console.print(
            f"error: {report.fatal_error}",
            style="red",
            soft_wrap=True,
            markup=False,
        )


def escape_workflow_data(data: str) -> str:
    return data.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def annotate_github_actions(report: CascadeReport) -> None:
    for entry in report.failed:
        message = escape_workflow_data(entry.message or entry.outcome)
        console.print(
            f"::warning title=Cascade update::#{entry.number} {entry.outcome}: {message}",
            soft_wrap=True,
            markup=False,
        )
