"""
Google Visualization (GViz) feed parser.

The sheet answers with a JSONP-style envelope:

    /*O_o*/
    google.visualization.Query.setResponse({"table": {"rows": [...]}, ...});

unwrap_envelope() strips the envelope, project_rows() turns the table rows
into RawRecord objects. Column layout (A-G):

    0 ID | 1 Nombre | 2 Descripcion | 3 Genero | 4 URL imagen | 5 Tallas | 6 Stock
"""

import json
from dataclasses import dataclass
from typing import Any, Optional
import structlog

from exceptions import EnvelopeFormatError

logger = structlog.get_logger(__name__)

ENVELOPE_MARKER = "google.visualization.Query.setResponse("

DEFAULT_HEADER_CAPTION = "NOMBRE PRODUCTO"

# Fewer raw cells than this and the row cannot hold a name
MIN_ROW_CELLS = 2


@dataclass(frozen=True)
class RawRecord:
    """One sheet row as text, before any domain conversion."""
    id: str
    name: str
    description: str
    audience: str
    image_url: str
    sizes: str
    stock: str


def unwrap_envelope(raw_text: str) -> dict:
    """
    Extract and decode the JSON payload from a GViz response.

    Takes everything between the marker and the last ')' in the text.

    Args:
        raw_text: Raw response text

    Returns:
        Decoded payload (expected to hold table.rows)

    Raises:
        EnvelopeFormatError: Marker missing or payload is not valid JSON
    """
    start = raw_text.find(ENVELOPE_MARKER)
    if start == -1:
        logger.error("gviz_marker_missing", length=len(raw_text))
        raise EnvelopeFormatError("Response does not contain the GViz envelope marker")

    payload_start = start + len(ENVELOPE_MARKER)
    payload_end = raw_text.rfind(")")
    payload = raw_text[payload_start:payload_end] if payload_end >= payload_start else ""

    try:
        decoded = json.loads(payload)
    except json.JSONDecodeError as e:
        logger.error("gviz_payload_invalid", error=str(e))
        raise EnvelopeFormatError(f"Envelope payload is not valid JSON: {e.msg}")
    except RecursionError:
        logger.error("gviz_payload_too_deep", length=len(payload))
        raise EnvelopeFormatError("Envelope payload is nested too deeply to decode")

    if not isinstance(decoded, dict):
        raise EnvelopeFormatError("Envelope payload is not a JSON object")

    return decoded


def _cell_text(cell: Any) -> str:
    """
    Text value of a GViz cell.

    Cells are null or {"v": value, "f": formatted}. Whole-number floats
    lose the '.0' so IDs like 12.0 read as '12'.
    """
    if not isinstance(cell, dict):
        return ""
    value = cell.get("v")
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def is_header_or_noise(name: str, header_caption: str = DEFAULT_HEADER_CAPTION) -> bool:
    """True for rows with no name or whose name is the header caption."""
    name = name.strip()
    return not name or header_caption.upper() in name.upper()


def _project_row(row: Any, header_caption: str) -> Optional[RawRecord]:
    cells = row.get("c") if isinstance(row, dict) else None
    if not isinstance(cells, list) or len(cells) < MIN_ROW_CELLS:
        return None

    values = [_cell_text(cells[i]) if i < len(cells) else "" for i in range(7)]
    record = RawRecord(*values)

    if is_header_or_noise(record.name, header_caption):
        return None
    return record


def project_rows(
    decoded: dict,
    header_caption: str = DEFAULT_HEADER_CAPTION,
) -> list[RawRecord]:
    """
    Map decoded GViz rows to RawRecord, skipping header and noise rows.

    Never raises: rows that do not fit are left out.

    Args:
        decoded: Payload returned by unwrap_envelope()
        header_caption: Text identifying the header row in the name column

    Returns:
        Records in sheet order
    """
    table = decoded.get("table") if isinstance(decoded, dict) else None
    rows = table.get("rows") if isinstance(table, dict) else None
    if not isinstance(rows, list):
        logger.warning("gviz_rows_missing")
        return []

    records = []
    for index, row in enumerate(rows):
        record = _project_row(row, header_caption)
        if record is None:
            logger.debug("gviz_row_skipped", row=index)
            continue
        records.append(record)

    logger.info("gviz_rows_projected", rows=len(rows), records=len(records))
    return records
