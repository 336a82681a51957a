from .chunk import chunk_records
from .redact import redact
from .text_split import split_string

__all__ = [
    "chunk_records",
    "redact",
    "split_string",
]
