"""ISI Record Field Extractor Module.

Reads fields from bibliographic records in the ISI (Web of Science) tagged
format. Each line starts with a three character tag followed by its content:

    AU Kohn, W
       Sham, LJ
    TI Self-consistent equations including exchange and correlation
       effects
    SO PHYSICAL REVIEW
    PY 1965

A line whose tag is blank continues the field of the line before it.
Missing or malformed fields never raise; they come back as empty strings.
"""

from typing import Iterator, Sequence, Tuple

# A record is an ordered sequence of tagged lines
TaggedRecord = Tuple[str, ...]

TAG_LENGTH = 3
CONTINUATION = "   "

TAG_AUTHOR = "AU "
TAG_TITLE = "TI "
TAG_SOURCE = "SO "
TAG_YEAR = "PY "
TAG_DATE = "PD "
TAG_VOLUME = "VL "
TAG_ISSUE = "IS "
TAG_BEGIN_PAGE = "BP "
TAG_END_PAGE = "EP "
TAG_ARTICLE_NUMBER = "AR "
TAG_DOI = "DI "

MONTHS = ('JAN', 'FEB', 'MAR', 'APR', 'MAY', 'JUN',
          'JUL', 'AUG', 'SEP', 'OCT', 'NOV', 'DEC')


def make_record(lines: Sequence[str]) -> TaggedRecord:
    """Freeze a sequence of lines into a TaggedRecord, dropping line endings."""
    return tuple(line.rstrip('\r\n') for line in lines)


def tag_of(line: str) -> str:
    """Return the three character tag of a line, padded with spaces."""
    return line[:TAG_LENGTH].ljust(TAG_LENGTH)


def content_of(line: str) -> str:
    """Return the content of a line (everything after the tag)."""
    return line[TAG_LENGTH:].rstrip()


def _next_in_run(record: Sequence[str], cursor: int, tag: str) -> Tuple[str, int]:
    """Return the next line at or after cursor inside a run of `tag`."""
    if cursor >= len(record):
        return "", cursor

    in_run = False
    for index, line in enumerate(record):
        line_tag = tag_of(line)
        if line_tag == tag:
            in_run = True
        elif line_tag != CONTINUATION:
            in_run = False
        if in_run and index >= cursor:
            return content_of(line), index + 1
    return "", cursor


def next_author(record: Sequence[str], cursor: int = 0) -> Tuple[str, int]:
    """
    Get the next author line of a record.

    Args:
        record: Tagged record lines
        cursor: Line index to resume from (0 for the first author)

    Returns:
        Tuple of (author, new_cursor). The author is empty and the cursor
        unchanged once no further author exists.
    """
    return _next_in_run(record, cursor, TAG_AUTHOR)


def next_title(record: Sequence[str], cursor: int = 0) -> Tuple[str, int]:
    """
    Get the next title segment of a record.

    Titles may span several lines; callers join the segments with single
    spaces. Same cursor contract as next_author().
    """
    return _next_in_run(record, cursor, TAG_TITLE)


def iter_authors(record: Sequence[str]) -> Iterator[str]:
    """Yield every author of a record in order."""
    cursor = 0
    while True:
        author, cursor = next_author(record, cursor)
        if not author:
            return
        yield author


def iter_title_segments(record: Sequence[str]) -> Iterator[str]:
    """Yield the title lines of a record in order."""
    cursor = 0
    while True:
        segment, cursor = next_title(record, cursor)
        if not segment:
            return
        yield segment


def title(record: Sequence[str]) -> str:
    """Full title with its segments joined by single spaces."""
    return ' '.join(segment.strip() for segment in iter_title_segments(record))


def _last_value(record: Sequence[str], tag: str) -> str:
    """Content of the last line carrying `tag`; later lines override earlier ones."""
    value = ""
    for line in record:
        if tag_of(line) == tag:
            value = content_of(line)
    return value


def source(record: Sequence[str]) -> str:
    """Journal name, including any continuation lines that follow it."""
    value = ""
    for index, line in enumerate(record):
        if tag_of(line) != TAG_SOURCE:
            continue
        value = content_of(line)
        for follower in record[index + 1:]:
            if tag_of(follower) != CONTINUATION:
                break
            value = f"{value} {content_of(follower).strip()}"
    return value


def year(record: Sequence[str]) -> str:
    return _last_value(record, TAG_YEAR)


def volume(record: Sequence[str]) -> str:
    return _last_value(record, TAG_VOLUME)


def issue(record: Sequence[str]) -> str:
    return _last_value(record, TAG_ISSUE)


def doi(record: Sequence[str]) -> str:
    return _last_value(record, TAG_DOI)


def pages(record: Sequence[str]) -> str:
    """
    Page range of a record.

    Returns "BP-EP" when both pages are known, "BP" with only a begin page,
    and falls back to the article number when no begin page exists.
    """
    begin = _last_value(record, TAG_BEGIN_PAGE)
    end = _last_value(record, TAG_END_PAGE)
    article = _last_value(record, TAG_ARTICLE_NUMBER)

    result = ""
    if begin:
        result = f"{begin}-{end}" if end else begin
    if not result and article:
        result = article
    return result


def month(record: Sequence[str]) -> str:
    """
    Three letter month of the publication date (e.g. "OCT").

    Only the upper case abbreviations in MONTHS are recognized; anything
    else means the record has no month.
    """
    abbrev = _last_value(record, TAG_DATE)[:3]
    return abbrev if abbrev in MONTHS else ""


def month_number(record: Sequence[str]) -> int:
    """Month of the publication date as 1..12, or 0 when unknown."""
    abbrev = month(record)
    return MONTHS.index(abbrev) + 1 if abbrev else 0


def day(record: Sequence[str]) -> str:
    """
    Day of the publication date.

    PD can be e.g. "OCT", "OCT-NOV" or "OCT 27"; only the last form has a
    day. Anything that is not an integer in [0, 31] is treated as absent.
    """
    value = _last_value(record, TAG_DATE)[3:].strip()
    try:
        number = int(value)
    except ValueError:
        return ""
    if number < 0 or number > 31:
        return ""
    return value
