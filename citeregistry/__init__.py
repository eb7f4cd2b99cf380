"""CiteRegistry Modules"""

from .exceptions import (
    CitationRegistryError,
    CapacityExceededError,
    KeyDerivationError,
    MissingAuthorError,
    InvalidYearError,
    DegenerateKeyError,
    InvalidHandleError,
    AggregationMismatchError,
)
from .registry import CitationRegistry, Reference
from .aggregation import Communicator, SerialCommunicator, LocalWorkerGroup, collect_citations
from .journal_formatter import JournalFormatter, print_cited_references
from .xml_exporter import XMLExporter, export_references_as_xml
from .isi_handler import ISIParser, ISIExporter, ISIEntry, load_into_registry, load_file
from .config import VERSION

__version__ = VERSION
