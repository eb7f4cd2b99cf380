"""ISI (Web of Science) Import/Export Handler Module.

Provides functionality to:
- Import and parse ISI tagged files, as exported by Web of Science or
  converted from BibTeX with bibutils (bib2xml | xml2isi)
- Export records back to the ISI layout
- Load parsed records into a CitationRegistry

An ISI file looks like:

    FN Clarivate Analytics Web of Science
    VR 1.0
    PT J
    AU Kohn, W
       Sham, LJ
    ...
    ER

    EF
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from loguru import logger

from .exceptions import KeyDerivationError
from .isi_record import (
    TaggedRecord,
    doi,
    iter_authors,
    make_record,
    tag_of,
    title,
    year,
)
from .registry import CitationRegistry

HEADER_TAGS = ("FN ", "VR ")
END_OF_RECORD = "ER"
END_OF_FILE = "EF"


@dataclass
class ISIEntry:
    """A single ISI record."""
    record: TaggedRecord

    @property
    def authors(self) -> List[str]:
        return list(iter_authors(self.record))

    @property
    def title(self) -> str:
        return title(self.record)

    @property
    def year(self) -> str:
        return year(self.record)

    @property
    def doi(self) -> str:
        """DOI from the DI field, empty if absent."""
        return doi(self.record)

    def to_isi(self) -> str:
        """Convert entry to ISI format string."""
        lines = list(self.record)
        lines.append(END_OF_RECORD)
        return "\n".join(lines)


class ISIParser:
    """Parser for ISI tagged files."""

    def parse_file(self, filepath: str) -> List[ISIEntry]:
        """
        Parse an ISI file.

        Args:
            filepath: Path to .isi / .txt file

        Returns:
            List of ISIEntry objects
        """
        path = Path(filepath)
        if not path.exists():
            logger.error(f"ISI file not found: {filepath}")
            return []

        try:
            content = path.read_text(encoding='utf-8-sig')
        except UnicodeDecodeError:
            content = path.read_text(encoding='latin-1')

        entries = self.parse_string(content)
        logger.info(f"Parsed {len(entries)} records from {path.name}")
        return entries

    def parse_string(self, content: str) -> List[ISIEntry]:
        """
        Parse ISI content from a string.

        Args:
            content: ISI content string

        Returns:
            List of ISIEntry objects
        """
        entries = []
        current: List[str] = []

        for raw_line in content.splitlines():
            # Leading blanks mark continuation lines and must survive.
            # ER/EF only count in the tag column, so "   ER" is content.
            line = raw_line.rstrip()
            if not line:
                continue

            if line == END_OF_RECORD:
                if current:
                    entries.append(ISIEntry(record=make_record(current)))
                current = []
            elif line == END_OF_FILE:
                break
            elif not current and tag_of(line) in HEADER_TAGS:
                continue
            else:
                current.append(line)

        # Handle case where file doesn't end with ER
        if current:
            entries.append(ISIEntry(record=make_record(current)))

        return entries


class ISIExporter:
    """Exporter for writing records in the ISI layout."""

    def export_entries(self, entries: List[ISIEntry]) -> str:
        """
        Export list of entries to an ISI format string.

        Args:
            entries: List of ISIEntry objects

        Returns:
            ISI formatted string
        """
        parts = ["FN CiteRegistry export", "VR 1.0"]
        parts.extend(entry.to_isi() + "\n" for entry in entries)
        parts.append(END_OF_FILE)
        return "\n".join(parts) + "\n"

    def export_to_file(self, entries: List[ISIEntry], filepath: str):
        """
        Export entries to an ISI file.

        Args:
            entries: List of ISIEntry objects
            filepath: Output file path
        """
        content = self.export_entries(entries)
        Path(filepath).write_text(content, encoding='utf-8')
        logger.info(f"Exported {len(entries)} entries to {filepath}")


@dataclass
class LoadResult:
    """Outcome of loading entries into a registry."""
    handles: List[int] = field(default_factory=list)
    skipped: List[Tuple[ISIEntry, KeyDerivationError]] = field(default_factory=list)


def load_into_registry(
    registry: CitationRegistry,
    entries: List[ISIEntry],
    strict: bool = False,
) -> LoadResult:
    """
    Add parsed entries to a registry, taking the DOI from the DI field.

    Args:
        registry: Registry to fill
        entries: Parsed entries, added in order
        strict: Re-raise the first KeyDerivationError instead of skipping
            the malformed record

    Returns:
        LoadResult with the new handles and the skipped entries

    Raises:
        CapacityExceededError: The registry filled up
        KeyDerivationError: A record is malformed and strict is set
    """
    result = LoadResult()
    for entry in entries:
        try:
            handle = registry.add(entry.record, doi=entry.doi)
        except KeyDerivationError as e:
            if strict:
                raise
            logger.warning(f"Skipping record without usable citation key: {e.message}")
            result.skipped.append((entry, e))
            continue
        result.handles.append(handle)

    logger.info(f"Loaded {len(result.handles)} references, skipped {len(result.skipped)}")
    return result


def load_file(
    filepath: str,
    registry: Optional[CitationRegistry] = None,
    strict: bool = False,
) -> Tuple[CitationRegistry, LoadResult]:
    """Parse an ISI file and load it into a (new) registry."""
    registry = registry if registry is not None else CitationRegistry()
    entries = ISIParser().parse_file(filepath)
    return registry, load_into_registry(registry, entries, strict=strict)
