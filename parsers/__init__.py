"""
Feed parsers module.
"""

from parsers.gviz_parser import (
    unwrap_envelope,
    project_rows,
    RawRecord,
)

__all__ = [
    "unwrap_envelope",
    "project_rows",
    "RawRecord",
]
