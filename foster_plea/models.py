from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

# Sheet column order, A through H
PLEA_ENTRY_FIELDS: Tuple[str, ...] = (
    "animal_type",
    "status",
    "name",
    "age",
    "physical_description",
    "plea_notes",
    "photo",
    "feeding_notes",
)


@dataclass(frozen=True)
class PleaEntry:
    """A cat or a group of cats that someone can foster."""

    animal_type: str
    status: str
    name: str = ""
    age: str = ""
    physical_description: str = ""
    plea_notes: str = ""
    photo: str = ""
    feeding_notes: str = ""

    def is_valid(self) -> bool:
        return self.animal_type != "" and self.status != ""


@dataclass(frozen=True)
class PleaFilter:
    animal_type: str
    status: str
    feeding_notes: str

    def matches(self, entry: PleaEntry) -> bool:
        return (
            entry.animal_type == self.animal_type
            and entry.status == self.status
            and entry.feeding_notes == self.feeding_notes
        )
