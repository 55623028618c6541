"""Field values exchanged with the benchmark harness.

The harness hands records to a binding as ``dict[str, ByteIterator]`` and
expects the same shape back from reads.  Elasticsearch stores plain strings,
so every value crossing the binding is a :class:`StringByteIterator`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping


class ByteIterator(ABC):
    """A field value that yields its bytes once, in order."""

    def __iter__(self) -> Iterator[int]:
        return self

    @abstractmethod
    def __next__(self) -> int: ...

    @abstractmethod
    def bytes_left(self) -> int:
        """Number of bytes not yet consumed."""

    def to_bytes(self) -> bytes:
        """Consume and return the remaining bytes."""
        return bytes(self)

    def to_string(self) -> str:
        """Consume the remaining bytes and decode them as UTF-8."""
        return self.to_bytes().decode("utf-8")

    def __str__(self) -> str:
        return self.to_string()


class StringByteIterator(ByteIterator):
    """A :class:`ByteIterator` backed by a ``str``.

    ``to_string()`` returns the unconsumed part without re-encoding when
    nothing has been read yet, which is the common case for bindings.
    """

    def __init__(self, value: str) -> None:
        self._value = value
        self._data = value.encode("utf-8")
        self._offset = 0

    def __next__(self) -> int:
        if self._offset >= len(self._data):
            raise StopIteration
        b = self._data[self._offset]
        self._offset += 1
        return b

    def bytes_left(self) -> int:
        return len(self._data) - self._offset

    def to_bytes(self) -> bytes:
        rest = self._data[self._offset :]
        self._offset = len(self._data)
        return rest

    def to_string(self) -> str:
        if self._offset == 0:
            self._offset = len(self._data)
            return self._value
        return super().to_string()

    def reset(self) -> None:
        """Rewind so the value can be consumed again."""
        self._offset = 0

    def __repr__(self) -> str:
        return f"StringByteIterator({self._value!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, StringByteIterator):
            return self._value == other._value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)


def get_string_map(values: Mapping[str, ByteIterator]) -> dict[str, str]:
    """Consume a record's values into plain strings."""
    return {name: value.to_string() for name, value in values.items()}


def get_byte_iterator_map(values: Mapping[str, str]) -> dict[str, StringByteIterator]:
    """Wrap plain string values for handing back to the harness."""
    return {name: StringByteIterator(value) for name, value in values.items()}
