"""Journal Style Formatter Module.

Prints the cited references of a registry as a plain text reference list,
most recent publications first:

 Kohn, W; Sham, LJ. PHYSICAL REVIEW, 140 (4A), A1133-A1138 (1965).
 Self-consistent equations including exchange and correlation effects.
 https://doi.org/10.1103/PhysRev.140.A1133

Lines are indented by one column and wrapped at LINE_WIDTH.
"""

from typing import List, Optional, Sequence, TextIO

from loguru import logger

from .chronology import chronological_order
from .config import config
from .isi_record import iter_authors, iter_title_segments, issue, pages, source, volume, year
from .registry import CitationRegistry, Reference

MARGIN = " "


class JournalFormatter:
    """Formats references in a journal citation style."""

    def __init__(
        self,
        line_width: Optional[int] = None,
        split_offset: Optional[int] = None,
        doi_url_prefix: Optional[str] = None,
    ):
        """
        Args:
            line_width: Last usable column (defaults to LINE_WIDTH)
            split_offset: Cut position for journal strings that cannot be
                wrapped (defaults to HARD_SPLIT_OFFSET)
            doi_url_prefix: Prefix turning a DOI into a link
        """
        self.line_width = line_width or config.LINE_WIDTH
        self.split_offset = split_offset or config.HARD_SPLIT_OFFSET
        self.doi_url_prefix = doi_url_prefix or config.DOI_URL_PREFIX

    def doi_link(self, doi: str) -> str:
        return f"{self.doi_url_prefix}{doi}"

    def format_journal(self, record: Sequence[str]) -> str:
        """
        Build the "journal, volume (issue), pages (year)." part of a citation.

        Missing components are left out together with their punctuation.
        """
        parts = []
        journal = source(record)
        if journal:
            parts.append(journal)
        vol = volume(record)
        if vol:
            iss = issue(record)
            parts.append(f"{vol} ({iss})" if iss else vol)
        page_range = pages(record)
        if page_range:
            parts.append(page_range)

        text = ", ".join(parts)
        pub_year = year(record)
        if pub_year:
            return f"{text} ({pub_year})." if text else f"({pub_year})."
        return f"{text}." if text else ""

    def _hard_split(self, text: str) -> List[str]:
        # The last chunk may fill the whole margin line
        chunks = []
        while len(MARGIN) + len(text) > self.line_width and len(text) > self.split_offset:
            chunks.append(text[:self.split_offset])
            text = text[self.split_offset:]
        chunks.append(text)
        return chunks

    def format_reference(self, ref: Reference) -> str:
        """
        Format a single reference.

        Returns:
            The entry's lines, each ending with a newline
        """
        record = ref.record
        lines: List[str] = []
        current = MARGIN
        column = len(MARGIN) + 1

        # Authors, separated by semicolons and wrapped at the line width
        n_authors = 0
        for author in iter_authors(record):
            if n_authors and column + len(author) > self.line_width:
                lines.append(current + ";")
                current = MARGIN
                column = len(MARGIN) + 1
            else:
                if n_authors:
                    current += "; "
                column += 2
            current += author
            column += len(author)
            n_authors += 1
        if n_authors:
            current += ". "
            column += 2

        # Journal, volume (issue), pages (year).
        journal = self.format_journal(record)
        if journal:
            if column + len(journal) > self.line_width and current.strip():
                lines.append(current)
                current = MARGIN
                column = len(MARGIN) + 1
            if column + len(journal) > self.line_width:
                chunks = self._hard_split(journal)
                lines.append(current + chunks[0])
                lines.extend(MARGIN + chunk for chunk in chunks[1:-1])
                current = MARGIN + chunks[-1]
            else:
                current += journal
        if current.strip():
            lines.append(current)

        # Title
        segments = [segment.strip() for segment in iter_title_segments(record)]
        for index, segment in enumerate(segments):
            suffix = "." if index == len(segments) - 1 else ""
            lines.append(MARGIN + segment + suffix)

        if ref.doi:
            lines.append(MARGIN + self.doi_link(ref.doi))

        return "".join(line.rstrip() + "\n" for line in lines)

    def format_cited(self, registry: CitationRegistry) -> str:
        """
        Format all cited references, most recent first.

        Each entry is followed by a blank line.
        """
        references = list(registry)
        order = chronological_order([ref.record for ref in references])

        entries = []
        for position in order:
            ref = references[position]
            if ref.cited:
                entries.append(self.format_reference(ref) + "\n")

        logger.debug(f"Formatted {len(entries)} cited references of {len(references)}")
        return "".join(entries)

    def write_cited(self, registry: CitationRegistry, stream: TextIO) -> None:
        """Write the cited references to an open text stream."""
        stream.write(self.format_cited(registry))


def print_cited_references(registry: CitationRegistry, stream: TextIO) -> None:
    """Write the cited references of a registry with the default settings."""
    JournalFormatter().write_cited(registry, stream)
