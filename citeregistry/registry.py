"""Citation Registry Module.

Keeps the references known to a program run, hands out stable integer
handles for them and tracks which ones were cited.

Usage:
    registry = CitationRegistry()
    handle = registry.add(record, doi="10.1103/PhysRev.140.A1133")
    registry.cite(handle)
    registry.citation_key(handle)   # "Kohn1965"
"""

from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence

from loguru import logger

from .citation_keys import generate_citation_key
from .config import config
from .exceptions import CapacityExceededError, InvalidHandleError
from .isi_record import TaggedRecord, make_record


@dataclass
class Reference:
    """A single bibliography entry owned by a registry."""
    handle: int
    record: TaggedRecord
    doi: str  # bare DOI, without "https://doi.org/"
    citation_key: str
    cited: bool = False


class CitationRegistry:
    """
    Append-only collection of references addressed by 1-based handles.

    Handles are dense: a registry holding `count` references answers to
    handles 1..count. Only the cited flag of a reference changes after it
    was added; clear() drops all of them at once.
    """

    def __init__(self, capacity: Optional[int] = None):
        """
        Args:
            capacity: Maximum number of references (defaults to MAX_REFERENCES)
        """
        self.capacity = capacity if capacity is not None else config.MAX_REFERENCES
        if self.capacity < 1:
            raise ValueError(f"Registry capacity must be positive, got {self.capacity}")
        self._references: List[Reference] = []

    def __len__(self) -> int:
        return len(self._references)

    def __iter__(self) -> Iterator[Reference]:
        return iter(self._references)

    @property
    def count(self) -> int:
        """Number of references currently held."""
        return len(self._references)

    def add(self, record: Sequence[str], doi: str = "") -> int:
        """
        Add a reference to the bibliography.

        Args:
            record: Tagged record lines
            doi: DOI without link prefix, may be empty

        Returns:
            Handle needed to cite this reference later

        Raises:
            CapacityExceededError: The registry is full
            KeyDerivationError: No citation key can be derived from the record
        """
        if self.count >= self.capacity:
            logger.error(f"Cannot add reference: registry full ({self.capacity})")
            raise CapacityExceededError(self.capacity)

        frozen = make_record(record)
        key = generate_citation_key(frozen, self.citation_keys())
        handle = self.count + 1
        self._references.append(Reference(
            handle=handle,
            record=frozen,
            doi=(doi or "").strip(),
            citation_key=key,
        ))
        logger.debug(f"Added reference #{handle} as {key}")
        return handle

    def _get(self, handle: int) -> Reference:
        if not isinstance(handle, int) or handle < 1 or handle > self.count:
            logger.error(f"Reference handle {handle} out of range [1, {self.count}]")
            raise InvalidHandleError(handle, self.count)
        return self._references[handle - 1]

    def cite(self, handle: int) -> None:
        """Mark a reference as cited. Citing twice has no further effect."""
        self._get(handle).cited = True

    def is_cited(self, handle: int) -> bool:
        return self._get(handle).cited

    def citation_key(self, handle: int) -> str:
        """Citation key of a reference, e.g. "Kohn1965b"."""
        return self._get(handle).citation_key

    def reference(self, handle: int) -> Reference:
        return self._get(handle)

    def citation_keys(self) -> List[str]:
        """All issued keys in handle order."""
        return [ref.citation_key for ref in self._references]

    def cited_handles(self) -> List[int]:
        return [ref.handle for ref in self._references if ref.cited]

    def handle_for_key(self, key: str) -> int:
        """
        Look up a handle by its citation key (case sensitive).

        Raises:
            KeyError: No reference carries this key
        """
        for ref in self._references:
            if ref.citation_key == key:
                return ref.handle
        raise KeyError(key)

    def records(self) -> List[TaggedRecord]:
        """Records in handle order."""
        return [ref.record for ref in self._references]

    def clear(self) -> None:
        """Remove all references. The next add() returns handle 1 again."""
        removed = self.count
        self._references = []
        logger.debug(f"Cleared {removed} references")
