"""Per-record data-quality errors raised by the storm impact pipelines."""

from __future__ import annotations


class MalformedRecord(ValueError):
    """A raw row whose date or numeric fields cannot be parsed.

    Only raised when the record filter runs in strict mode. Otherwise
    malformed rows are dropped and counted.
    """

    def __init__(self, record_id: int, field: str, value: object) -> None:
        self.record_id = record_id
        self.field = field
        self.value = value
        super().__init__(
            f"Record {record_id}: cannot parse {field}={value!r}"
        )


class UnrecognizedMagnitudeCode(ValueError):
    """A damage magnitude code outside '', K, M, B (any case)."""

    def __init__(self, code: object) -> None:
        self.code = code
        super().__init__(f"Unrecognized damage magnitude code {code!r}")
