from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

import config
from apimodel.model import Item


class Issue(Enum):
    TODO = "Todo"
    INT_DEF = "IntDef"
    NULLABLE = "Nullable"


@dataclass
class Diagnostic:
    issue: Issue
    item: Item = field(repr=False)
    message: str

    def location(self) -> str:
        return self.item.location()

    def render(self) -> str:
        return f"{self.location()}: warning: {self.message} [{self.issue.value}]"

    def to_json(self) -> Dict[str, Any]:
        return {
            "kind": self.issue.name,
            "item": self.item.qualified_name(),
            "message": self.message,
            "location": self.location(),
        }


class Reporter:
    """Collects advisory diagnostics in emission order."""

    def __init__(self) -> None:
        self.diagnostics: List[Diagnostic] = []

    def report(self, issue: Issue, item: Item, message: str) -> None:
        diag = Diagnostic(issue, item, message)
        self.diagnostics.append(diag)
        if config.VERBOSE:
            print(f"[API LINT] {diag.render()}")

    def count(self, issue: Issue | None = None) -> int:
        if issue is None:
            return len(self.diagnostics)
        return sum(1 for d in self.diagnostics if d.issue is issue)
