"""Immutable tag sets attached to samples and submetric filters."""
from __future__ import annotations

from typing import Dict, Iterator, Mapping, Optional, Tuple

TagPairs = Tuple[Tuple[str, str], ...]


def _labels_to_key(labels: Mapping[str, str] | None) -> TagPairs:
    if not labels:
        return tuple()
    return tuple(sorted((str(k), str(v)) for k, v in labels.items()))


class SampleTags:
    """An unordered key/value set whose equality ignores insertion order."""

    __slots__ = ("_pairs", "_lookup")

    def __init__(self, tags: Optional[Mapping[str, str]] = None) -> None:
        self._pairs: TagPairs = _labels_to_key(tags)
        self._lookup: Dict[str, str] = dict(self._pairs)

    @classmethod
    def from_mapping(cls, tags: Optional[Mapping[str, str]]) -> "SampleTags":
        return cls(tags)

    def is_equal(self, other: Optional["SampleTags"]) -> bool:
        if other is None:
            return False
        if self is other:
            return True
        return self._pairs == other._pairs

    def contains(self, other: "SampleTags") -> bool:
        """Return True when every pair of ``other`` is present here."""
        for key, value in other._pairs:
            if self._lookup.get(key) != value:
                return False
        return True

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._lookup.get(key, default)

    def to_dict(self) -> Dict[str, str]:
        return dict(self._pairs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SampleTags):
            return NotImplemented
        return self.is_equal(other)

    def __hash__(self) -> int:
        return hash(self._pairs)

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    def __contains__(self, key: object) -> bool:
        return key in self._lookup

    def __repr__(self) -> str:
        inner = ",".join(f"{k}:{v}" for k, v in self._pairs)
        return f"SampleTags({{{inner}}})"


def into_sample_tags(tags: Optional[Mapping[str, str]]) -> SampleTags:
    return SampleTags.from_mapping(tags)
