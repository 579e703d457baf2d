"""
Daily workout model and the text encoding used for workout content.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any

from forma.models.parsing import format_date
from forma.models.parsing import format_datetime
from forma.models.parsing import parse_date
from forma.models.parsing import parse_datetime


TITLE_PREFIX = "# "

class ElementType(str, Enum):
    TITLE = "title"
    TEXT = "text"

@dataclass
class WorkoutElement:
    """One block of a workout: a heading or a paragraph."""
    type: ElementType
    content: str

    @classmethod
    def title(cls, content: str) -> "WorkoutElement":
        return cls(ElementType.TITLE, content)

    @classmethod
    def text(cls, content: str) -> "WorkoutElement":
        return cls(ElementType.TEXT, content)

@dataclass
class DailyWorkout:
    """Workout published by a gym for a single day."""
    id: str
    gym_id: str
    workout_date: date
    workout_text: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def elements(self) -> list[WorkoutElement]:
        return parse_workout_text(self.workout_text)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DailyWorkout":
        workout_date = parse_date(data.get('workout_date'))
        if workout_date is None:
            raise ValueError("Workout is missing workout_date")
        return cls(
            id=str(data['id']),
            gym_id=str(data.get('gym_id', '')),
            workout_date=workout_date,
            workout_text=str(data.get('workout_text') or ''),
            created_at=parse_datetime(data.get('created_at')),
            updated_at=parse_datetime(data.get('updated_at')),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'gym_id': self.gym_id,
            'workout_date': format_date(self.workout_date),
            'workout_text': self.workout_text,
            'created_at': format_datetime(self.created_at),
            'updated_at': format_datetime(self.updated_at),
        }

def compose_workout_text(elements: list[WorkoutElement]) -> str:
    """Encode elements as text: titles become ``# title`` lines, blocks are
    separated by a blank line and empty elements are dropped."""
    blocks = []
    for element in elements:
        content = element.content.strip()
        if not content:
            continue
        if element.type is ElementType.TITLE:
            blocks.append(f"{TITLE_PREFIX}{content}")
        else:
            blocks.append(content)
    return "\n\n".join(blocks)

def parse_workout_text(text: str) -> list[WorkoutElement]:
    """Decode workout text back into elements.

    A line starting with ``# `` is a title. Consecutive non-blank lines form
    one text block; a blank line or a title ends the block.
    """
    elements: list[WorkoutElement] = []
    block: list[str] = []

    def flush() -> None:
        content = "\n".join(block).strip()
        if content:
            elements.append(WorkoutElement.text(content))
        block.clear()

    for line in text.split("\n"):
        stripped = line.strip()
        if stripped.startswith(TITLE_PREFIX):
            flush()
            elements.append(WorkoutElement.title(stripped[len(TITLE_PREFIX):].strip()))
        elif stripped:
            block.append(line)
        else:
            flush()
    flush()
    return elements
