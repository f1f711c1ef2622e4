"""Interactive query menu over a loaded meter database."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List

import typer

from cli import render
from datastore.meter_database import MeterData, MeterDatabase

MENU_LINES = (
    "Search Database:",
    "1. Find all average readings",
    "2. Find unhealthy readings",
    "3. Find broken readings",
    "4. Find individual meter's readings",
    "5. Quit",
)
INVALID_CHOICE = "Please enter 1, 2, 3, 4, or 5."


def _prompt(text: str) -> str:
    return typer.prompt(text, default="", show_default=False)


@dataclass
class Session:
    """State threaded through the menu loop for one loaded file."""

    database: MeterDatabase
    prompt: Callable[[str], str] = field(default=_prompt)

    def run(self) -> None:
        actions = {
            "1": lambda: render.render_averages(self.database),
            "2": lambda: render.render_unhealthy(self.database),
            "3": lambda: render.render_broken(self.database),
            "4": self.find_meter,
        }
        while True:
            for line in MENU_LINES:
                typer.echo(line)
            choice = self.prompt("Choice").strip()
            if choice == "5":
                return
            action = actions.get(choice)
            if action is None:
                typer.echo(INVALID_CHOICE)
                continue
            action()
            typer.echo()

    def find_meter(self) -> None:
        query = self.prompt("Which meter?").strip()
        matches = self.database.match_meter_name(query)
        typer.echo(f"Found {len(matches)} meters.")
        if not matches:
            return
        for position, meter in enumerate(matches, start=1):
            typer.echo(f"{position}. {meter.meter_name}")
        selected = self._choose(matches)
        if selected is not None:
            render.render_meter(selected)

    def _choose(self, matches: List[MeterData]) -> MeterData | None:
        while True:
            answer = self.prompt("Meter number (blank to cancel)").strip()
            if not answer:
                return None
            if answer.isdigit() and 1 <= int(answer) <= len(matches):
                return matches[int(answer) - 1]
            typer.echo(f"Please enter a number between 1 and {len(matches)}.")
