"""The ``Note`` record and its value types.

A note refers to other notes by id only; ownership of every note lives in
:class:`~nexia.core.notebook.Notebook`.
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from pydantic import JsonValue, TypeAdapter, ValidationError

NoteId = uuid.UUID

# null / bool / number / string / list / mapping, recursively.
AttributeValue = JsonValue

_attribute_adapter: TypeAdapter[JsonValue] = TypeAdapter(JsonValue)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def validate_attribute(key: str, value: object) -> AttributeValue:
    """Return *value* as an attribute value or raise ``ValueError``.

    NaN and infinities are refused: they have no JSON representation.
    """
    if not isinstance(key, str):
        raise ValueError(f"Attribute keys must be strings, got {type(key).__name__}")
    try:
        validated = _attribute_adapter.validate_python(value)
    except ValidationError as exc:
        raise ValueError(
            f"Unsupported value for attribute {key!r}: {type(value).__name__}"
        ) from exc
    if not _is_finite(validated):
        raise ValueError(f"Unsupported value for attribute {key!r}: non-finite number")
    return validated


def _is_finite(value: object) -> bool:
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, list):
        return all(_is_finite(item) for item in value)
    if isinstance(value, dict):
        return all(_is_finite(item) for item in value.values())
    return True


@dataclass(frozen=True)
class Point2D:
    """Position on the spatial canvas."""

    x: float
    y: float

    @classmethod
    def origin(cls) -> Point2D:
        return cls(0.0, 0.0)


@dataclass
class Note:
    """A single note in the knowledge graph.

    ``links`` keeps first-insertion order and never holds duplicates or the
    note's own id; both are dropped on construction as well as in
    :meth:`add_link`.
    """

    title: str = ""
    content: str = ""
    id: NoteId = field(default_factory=uuid.uuid4)
    position: Optional[Point2D] = None
    size: Optional[tuple[float, float]] = None
    created_at: datetime = field(default_factory=utcnow)
    modified_at: Optional[datetime] = None
    links: list[NoteId] = field(default_factory=list)
    prototype: Optional[NoteId] = None
    attributes: dict[str, AttributeValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.modified_at is None:
            self.modified_at = self.created_at

        links: list[NoteId] = []
        for target in self.links:
            if target != self.id and target not in links:
                links.append(target)
        self.links = links

        self.attributes = {
            key: validate_attribute(key, value)
            for key, value in self.attributes.items()
        }

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def create(cls, title: str) -> Note:
        """Create a new note with a fresh id and no optional fields set."""
        return cls(title=title)

    def with_position(self, x: float, y: float) -> Note:
        """Place the note on the canvas and return it (builder style)."""
        self.position = Point2D(x, y)
        return self

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------
    def touch(self) -> None:
        """Advance ``modified_at`` to now; it never moves backwards."""
        now = utcnow()
        if self.modified_at is None or now > self.modified_at:
            self.modified_at = now

    def set_title(self, title: str) -> None:
        self.title = title
        self.touch()

    def set_content(self, content: str) -> None:
        self.content = content
        self.touch()

    def set_position(self, position: Optional[Point2D]) -> None:
        self.position = position
        self.touch()

    def set_size(self, size: Optional[tuple[float, float]]) -> None:
        self.size = None if size is None else (float(size[0]), float(size[1]))
        self.touch()

    def set_prototype(self, prototype: Optional[NoteId]) -> None:
        self.prototype = prototype
        self.touch()

    def add_link(self, target: NoteId) -> None:
        """Append *target* unless it is this note or already linked."""
        if target != self.id and target not in self.links:
            self.links.append(target)
            self.touch()

    def remove_link(self, target: NoteId) -> bool:
        """Remove *target* from ``links``.  Returns whether it was present."""
        try:
            self.links.remove(target)
        except ValueError:
            return False
        self.touch()
        return True

    def links_to(self, target: NoteId) -> bool:
        return target in self.links

    # ------------------------------------------------------------------
    # Attribute bag
    # ------------------------------------------------------------------
    def set_attribute(self, key: str, value: object) -> None:
        """Insert or overwrite an attribute.

        Raises:
            ValueError: If *value* is not a null / bool / number / string /
                list / mapping structure.
        """
        self.attributes[key] = validate_attribute(key, value)
        self.touch()

    def get_attribute(self, key: str) -> Optional[AttributeValue]:
        return self.attributes.get(key)
