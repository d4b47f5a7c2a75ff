from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import config


@dataclass
class MethodPermissionRecord:
    method_name: str
    attribute: str
    class_name: str
    return_type: str
    params: List[str] = field(default_factory=list)
    permissions: List[str] = field(default_factory=list)

    def to_json(self) -> Dict[str, Any]:
        return {
            "methodName": self.method_name,
            "attribute": self.attribute,
            "class": self.class_name,
            "return": self.return_type,
            "param": list(self.params),
            "permission": list(self.permissions),
        }


@dataclass
class FieldPermissionRecord:
    field_name: str
    attribute: str
    class_name: str
    value: Any = None
    permissions: List[str] = field(default_factory=list)

    def to_json(self) -> Dict[str, Any]:
        return {
            "fieldName": self.field_name,
            "attribute": self.attribute,
            "class": self.class_name,
            "value": self.value,
            "permission": list(self.permissions),
        }


class PermissionReport:
    """
    Accumulates permission records for one run.

    start() -> insert_*_record()... -> end()
    The whole report stays in memory and is written once by end().
    """

    def __init__(self) -> None:
        self._methods: Optional[List[MethodPermissionRecord]] = None
        self._fields: Optional[List[FieldPermissionRecord]] = None

    def start(self) -> None:
        self._methods = []
        self._fields = []

    @property
    def started(self) -> bool:
        return self._methods is not None

    def _require_started(self) -> None:
        if not self.started:
            raise RuntimeError("PermissionReport.start() must be called before inserting records")

    def insert_method_record(self, record: MethodPermissionRecord) -> None:
        self._require_started()
        self._methods.append(record)

    def insert_field_record(self, record: FieldPermissionRecord) -> None:
        self._require_started()
        self._fields.append(record)

    @property
    def method_records(self) -> List[MethodPermissionRecord]:
        return list(self._methods or [])

    @property
    def field_records(self) -> List[FieldPermissionRecord]:
        return list(self._fields or [])

    def to_document(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            "method": [r.to_json() for r in self.method_records],
            "field": [r.to_json() for r in self.field_records],
        }

    def end(self, path: Path | str | None = None) -> Dict[str, List[Dict[str, Any]]]:
        """
        Serialize the report (pretty-printed JSON) to `path`, defaulting to
        config.REPORT_FILE in the working directory. Creates or overwrites
        the file; write errors propagate.
        """
        self._require_started()
        document = self.to_document()
        target = Path(path) if path is not None else config.REPORT_FILE
        target.write_text(json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8")
        print(
            f"[API LINT] Report written to {target} "
            f"({len(document['method'])} method, {len(document['field'])} field records)"
        )
        return document
