"""Outcome registry - fixed, ordered set of mutually exclusive outcome tags."""

from __future__ import annotations

from enum import Enum
from typing import Generic, Hashable, Iterable, Iterator, TypeVar

from lmsrmarket.market.errors import UnknownOutcome

T = TypeVar("T", bound=Hashable)
E = TypeVar("E", bound=Enum)


class BinaryOutcome(Enum):
    """Yes/No outcome for binary markets."""

    YES = "Yes"
    NO = "No"

    @classmethod
    def from_bool(cls, value: bool) -> BinaryOutcome:
        return cls.YES if value else cls.NO

    def __bool__(self) -> bool:
        return self is BinaryOutcome.YES


def _label(tag: Hashable) -> str:
    if isinstance(tag, Enum):
        return tag.name
    return str(tag)


class OutcomeSet(Generic[T]):
    """Ordered registry of outcome tags with an injective tag -> index lookup.

    Built once at market creation and never modified. Labels are stable strings
    used wherever outcomes cross a process boundary (snapshots, storage, CLI).
    """

    __slots__ = ("_tags", "_index", "_by_label")

    def __init__(self, tags: Iterable[T]) -> None:
        ordered = tuple(tags)
        if len(ordered) < 2:
            raise ValueError(f"An outcome set needs at least 2 outcomes, got {len(ordered)}")
        index: dict[T, int] = {}
        by_label: dict[str, T] = {}
        for i, tag in enumerate(ordered):
            if tag in index:
                raise ValueError(f"Duplicate outcome: {tag!r}")
            label = _label(tag)
            if label in by_label:
                raise ValueError(f"Duplicate outcome label: {label!r}")
            index[tag] = i
            by_label[label] = tag
        self._tags = ordered
        self._index = index
        self._by_label = by_label

    @classmethod
    def from_enum(cls, enum_cls: type[E]) -> OutcomeSet[E]:
        """Registry of an enum's members in declaration order."""
        return cls(list(enum_cls))

    @classmethod
    def binary(cls) -> OutcomeSet[BinaryOutcome]:
        return cls.from_enum(BinaryOutcome)

    def _find(self, outcome: object) -> int | None:
        # Equal but differently typed tags (True vs 1, 1.0 vs 1) are not members
        try:
            i = self._index.get(outcome)
        except TypeError:
            return None
        if i is None or type(self._tags[i]) is not type(outcome):
            return None
        return i

    def index_of(self, outcome: T) -> int:
        i = self._find(outcome)
        if i is None:
            raise UnknownOutcome(outcome)
        return i

    def outcome_at(self, index: int) -> T:
        if not 0 <= index < len(self._tags):
            raise UnknownOutcome(index)
        return self._tags[index]

    def label_of(self, outcome: T) -> str:
        return _label(self._tags[self.index_of(outcome)])

    def from_label(self, label: str) -> T:
        try:
            return self._by_label[label]
        except KeyError:
            raise UnknownOutcome(label) from None

    @property
    def labels(self) -> list[str]:
        return [_label(t) for t in self._tags]

    def __len__(self) -> int:
        return len(self._tags)

    def __iter__(self) -> Iterator[T]:
        return iter(self._tags)

    def __contains__(self, outcome: object) -> bool:
        return self._find(outcome) is not None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OutcomeSet):
            return NotImplemented
        return self._tags == other._tags

    def __hash__(self) -> int:
        return hash(self._tags)

    def __repr__(self) -> str:
        return f"OutcomeSet({list(self._tags)!r})"
