# src/todo_desk/tasks/task_models.py

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import StrEnum
from typing import Any

DUE_DATE_DISPLAY_FORMAT = "%m/%d/%Y"


class DateFilter(StrEnum):
    """Date-range filter applied to the task view."""

    ALL = "all"
    TODAY = "today"
    WEEK = "week"
    OVERDUE = "overdue"

    @classmethod
    def parse(cls, raw: str | DateFilter | None) -> DateFilter:
        if isinstance(raw, DateFilter):
            return raw
        if not raw:
            return cls.ALL
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.ALL


class SaveState(StrEnum):
    """Auto-save coordinator lifecycle."""

    IDLE = "idle"
    PENDING_SAVE = "pending_save"  # debounce window open
    SAVING = "saving"
    ERROR = "error"


class SaveSeverity(StrEnum):
    SAVED = "saved"
    SAVING = "saving"
    ERROR = "error"


@dataclass(slots=True, frozen=True)
class SaveStatus:
    message: str
    severity: SaveSeverity

    @classmethod
    def saved(cls) -> SaveStatus:
        return cls("All changes saved", SaveSeverity.SAVED)

    @classmethod
    def saving(cls) -> SaveStatus:
        return cls("Saving...", SaveSeverity.SAVING)

    @classmethod
    def error(cls, reason: str) -> SaveStatus:
        return cls(f"Error: {reason}", SaveSeverity.ERROR)


def new_task_id() -> str:
    return str(uuid.uuid4())


def coerce_due_date(value: Any) -> datetime | None:
    """Accept datetime, date or ISO-8601 text; anything else becomes None."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        try:
            return datetime.fromisoformat(raw)
        except ValueError:
            return None
    return None


@dataclass(slots=True)
class Task:
    """
    One to-do item.

    `id` is assigned once at construction and cannot be reassigned.
    `tags` is the raw comma-separated text; use `tag_list` for the parsed form.
    Due dates have date-only semantics: the time of day is ignored everywhere.
    """

    id: str = field(default_factory=new_task_id)
    title: str = ""
    is_completed: bool = False
    tags: str = ""
    due_date: datetime | None = None

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "id" and hasattr(self, "id"):
            raise AttributeError("Task.id is immutable")
        if name in ("title", "tags"):
            value = "" if value is None else str(value)
        elif name == "is_completed":
            value = bool(value)
        elif name == "due_date":
            value = coerce_due_date(value)
        object.__setattr__(self, name, value)

    # ---- derived, never stored ----

    @property
    def tag_list(self) -> list[str]:
        out: list[str] = []
        for part in self.tags.split(","):
            tag = part.strip()
            if tag and tag not in out:
                out.append(tag)
        return out

    @property
    def is_overdue(self) -> bool:
        return self.overdue_on(date.today())

    def overdue_on(self, day: date) -> bool:
        if self.is_completed or self.due_date is None:
            return False
        return self.due_date.date() < day

    @property
    def due_day(self) -> date | None:
        return self.due_date.date() if self.due_date is not None else None

    @property
    def due_date_display(self) -> str:
        if self.due_date is None:
            return ""
        return self.due_date.strftime(DUE_DATE_DISPLAY_FORMAT)

    # ---- JSON wire form ----

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "isCompleted": self.is_completed,
            "tags": self.tags,
            "dueDate": self.due_date.isoformat() if self.due_date is not None else None,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Task:
        """
        Build a Task from a persisted object.

        Accepts camelCase keys and the PascalCase keys of older files.
        Extra keys are ignored; a missing id gets a fresh one.
        """

        def pick(camel: str) -> Any:
            if camel in raw:
                return raw[camel]
            return raw.get(camel[:1].upper() + camel[1:])

        task_id = pick("id")
        kwargs: dict[str, Any] = {
            "title": pick("title"),
            "is_completed": pick("isCompleted") is True,
            "tags": pick("tags"),
            "due_date": pick("dueDate"),
        }
        if task_id is not None and str(task_id).strip():
            kwargs["id"] = str(task_id)
        return cls(**kwargs)
