"""Data types shared between bindings and the harness."""

from esbench.models.fields import (
    ByteIterator,
    StringByteIterator,
    get_byte_iterator_map,
    get_string_map,
)

__all__ = ["ByteIterator", "StringByteIterator", "get_byte_iterator_map", "get_string_map"]
