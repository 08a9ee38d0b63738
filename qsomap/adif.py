"""ADIF log parsing.

An ADIF file is a free-text header terminated by <EOH>, followed by QSO
records each terminated by <EOR>. Fields look like <CALL:5>W1AW or
<FREQ:6:N>14.074. Values are returned as strings; nothing here checks that a
date is a date or a frequency is a number.
"""

import logging
import re
from pathlib import Path

from .errors import AdifParseError


logger = logging.getLogger(__name__)

EOH_PATTERN = re.compile(r'<EOH>', re.IGNORECASE)
EOR_PATTERN = re.compile(r'<EOR>', re.IGNORECASE)

# <name:length[:type]>payload -- payload runs up to the next tag
TAG_PATTERN = re.compile(r'<([^:<>]*):(\d+)(:[^<>]*)?>([^<]*)')


def split_header(text: str) -> tuple[str, str]:
    """Split ADIF text into header and record portions.

    Raises:
        AdifParseError: if there is no <EOH> marker
    """
    match = EOH_PATTERN.search(text)
    if not match:
        raise AdifParseError("Invalid ADIF format: missing <EOH> marker")
    return text[:match.start()], text[match.end():]


def parse_fields(block: str, normalize_tags: bool = False) -> dict[str, str]:
    """Extract all <tag:len>value fields from one block of text."""
    fields = {}
    for match in TAG_PATTERN.finditer(block):
        name, _length, _type_code, value = match.groups()
        name = name.strip()
        if not name:
            continue
        if normalize_tags:
            name = name.upper()
        fields[name] = value.strip()
    return fields


def parse_adif(text: str, normalize_tags: bool = False) -> list[dict[str, str]]:
    """Parse ADIF text into a list of QSO records.

    Args:
        text: Full contents of an .adi/.adif file
        normalize_tags: Upper-case field names at parse time. When False the
            names are kept exactly as they appear in the file.

    Returns:
        List of records (field name -> value) in file order. Blocks with no
        fields, such as the trailing text after the last <EOR>, are dropped.

    Raises:
        AdifParseError: if the text has no <EOH> marker
    """
    _header, body = split_header(text)

    records = []
    for block in EOR_PATTERN.split(body):
        if not block.strip():
            continue
        record = parse_fields(block, normalize_tags)
        if record:
            records.append(record)

    logger.debug("Parsed %d ADIF records", len(records))
    return records


def parse_adif_header(text: str) -> dict[str, str]:
    """Return the tagged fields in the ADIF header (ADIF_VER, PROGRAMID, ...)."""
    header, _body = split_header(text)
    return parse_fields(header, normalize_tags=True)


def load_adif(path: Path | str, normalize_tags: bool = False) -> list[dict[str, str]]:
    """Read and parse an ADIF file from disk."""
    content = Path(path).read_text(encoding='utf-8', errors='replace')
    return parse_adif(content, normalize_tags)


def get_field(record: dict[str, str], name: str, default: str | None = None) -> str | None:
    """Look up a field by name, ignoring case.

    Logs in the wild mix <call:5> and <CALL:5>, so every consumer reads
    fields through here rather than indexing the dict.
    """
    if name in record:
        return record[name]
    wanted = name.upper()
    for key, value in record.items():
        if key.upper() == wanted:
            return value
    return default
