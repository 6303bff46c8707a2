"""
Label table.

Labels are stored as records in a list and addressed by their index, which
never changes once allocated. A separate name index provides lookups by name.
A record is filled in over time: the parser creates it (on definition or on
first forward reference) and sets its definition span, and the generator sets
its resolved address.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from .sources import Span


@dataclass
class LabelRecord:
    """
    State of a single label.

    Attributes:
        name: Label name without the trailing colon
        value: Resolved instruction address (None until layout)
        span: Span of the definition, colon included (None while only referenced)
    """

    name: str
    value: Optional[int] = None
    span: Optional[Span] = None

    @property
    def is_defined(self) -> bool:
        return self.span is not None


class LabelTable:
    """Arena of label records indexed by a stable integer id."""

    def __init__(self):
        self._records: List[LabelRecord] = []
        self._ids: Dict[str, int] = {}

    def get_id(self, name: str) -> Optional[int]:
        """Get the id of a label, or None if it was never seen."""
        return self._ids.get(name)

    def insert_unique(self, name: str, span: Optional[Span] = None) -> int:
        """
        Add a new label.

        Raises:
            KeyError: If a label with this name already exists
        """
        if name in self._ids:
            raise KeyError(f"Label already exists: {name}")
        self._records.append(LabelRecord(name=name, span=span))
        label_id = len(self._records) - 1
        self._ids[name] = label_id
        return label_id

    def get_or_insert_reference(self, name: str) -> int:
        """Get the id of a label, adding it as a forward reference if unknown."""
        label_id = self._ids.get(name)
        if label_id is None:
            label_id = self.insert_unique(name)
        return label_id

    def get_name(self, label_id: int) -> str:
        return self._records[label_id].name

    def get_span(self, label_id: int) -> Optional[Span]:
        return self._records[label_id].span

    def set_span(self, label_id: int, span: Span) -> None:
        self._records[label_id].span = span

    def get_value(self, label_id: int) -> Optional[int]:
        return self._records[label_id].value

    def set_value(self, label_id: int, value: int) -> None:
        self._records[label_id].value = value

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, name: str) -> bool:
        return name in self._ids

    def __iter__(self) -> Iterator[LabelRecord]:
        return iter(self._records)

    def as_dict(self) -> Dict[str, Optional[int]]:
        """Map of label name to resolved address."""
        return {record.name: record.value for record in self._records}
