import dataclasses
from typing import Any


@dataclasses.dataclass(frozen=True)
class RawRecord:
    id: str
    fields: dict[str, Any]
    created_time: str = None

    @classmethod
    def build(cls, id: str, fields: dict | None = None, createdTime: str = None, **kwargs):
        return cls(id, dict(fields or {}), createdTime)

    def get(self, field_name: str, default=None):
        return self.fields.get(field_name, default)


@dataclasses.dataclass(frozen=True)
class RecordPage:
    records: list[RawRecord]
    offset: str = None

    @classmethod
    def build(cls, records: list[dict] | None = None, offset: str = None, **kwargs):
        return cls([RawRecord.build(**record) for record in records or []], offset or None)

    @property
    def has_more(self) -> bool:
        return self.offset is not None
