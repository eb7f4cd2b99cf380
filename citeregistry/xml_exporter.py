"""XML Export Module.

Exports every reference of a registry, cited or not, as a sequence of
<REFERENCE> elements:

 <REFERENCE key="Kohn1965">
  <AUTHOR>Kohn, W</AUTHOR>
  <DOI>10.1103/PhysRev.140.A1133</DOI>
  ...
  <TITLE>Self-consistent equations including exchange and correlation effects</TITLE>
 </REFERENCE>

The sequence has no root element; export_document() adds one.
"""

from pathlib import Path
from typing import List, TextIO
from xml.sax.saxutils import escape

from loguru import logger

from .isi_record import day, issue, iter_authors, month, pages, source, title, volume, year
from .registry import CitationRegistry, Reference

XML_ENTITIES = {'"': '&quot;', "'": '&apos;'}


def escape_xml(text: str) -> str:
    """Replace the XML special characters & < > " ' by entities."""
    return escape(text, XML_ENTITIES)


def _element(tag: str, text: str, indent: str = "  ") -> str:
    return f"{indent}<{tag}>{escape_xml(text)}</{tag}>"


class XMLExporter:
    """Renders registry contents as XML."""

    def reference_lines(self, ref: Reference) -> List[str]:
        """Lines of the <REFERENCE> element for one reference."""
        record = ref.record
        lines = [f' <REFERENCE key="{escape_xml(ref.citation_key)}">']
        lines.extend(_element("AUTHOR", author) for author in iter_authors(record))
        lines.append(_element("DOI", ref.doi))
        lines.append(_element("SOURCE", source(record)))
        lines.append(_element("VOLUME", volume(record)))
        lines.append(_element("ISSUE", issue(record)))
        lines.append(_element("PAGES", pages(record)))
        lines.append(_element("YEAR", year(record)))
        lines.append(_element("MONTH", month(record)))
        lines.append(_element("DAY", day(record).lstrip()))
        lines.append(_element("TITLE", title(record)))
        lines.append(" </REFERENCE>")
        return lines

    def export(self, registry: CitationRegistry) -> str:
        """All references as a root-less sequence of elements."""
        lines = []
        for ref in registry:
            lines.extend(self.reference_lines(ref))
        return "".join(line + "\n" for line in lines)

    def export_document(self, registry: CitationRegistry, root: str = "REFERENCES") -> str:
        """All references wrapped in an XML declaration and a root element."""
        return (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            f"<{root}>\n"
            f"{self.export(registry)}"
            f"</{root}>\n"
        )

    def write(self, registry: CitationRegistry, stream: TextIO) -> None:
        stream.write(self.export(registry))

    def export_to_file(self, registry: CitationRegistry, filepath: str, root: str = "REFERENCES"):
        """
        Export a registry to an XML document on disk.

        Args:
            registry: Registry to export
            filepath: Output file path
            root: Name of the root element
        """
        Path(filepath).write_text(self.export_document(registry, root), encoding='utf-8')
        logger.info(f"Exported {len(registry)} references to {filepath}")


def export_references_as_xml(registry: CitationRegistry, stream: TextIO) -> None:
    """Write all references of a registry as XML elements."""
    XMLExporter().write(registry, stream)
