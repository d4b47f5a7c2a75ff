from __future__ import annotations

from typing import Any, Callable

from apimodel.codebase import Codebase
from apimodel.model import ClassItem, FieldItem, Item, MethodItem, ParameterItem

API_VISIBILITY = ("public", "protected")


def method_source_order(method: MethodItem) -> Any:
    return method.source_order


def field_name_order(f: FieldItem) -> Any:
    return (f.name, f.containing_class.qualified_name())


class ApiVisitor:
    """
    Walks a Codebase in a deterministic order and calls the per-kind hooks.

    For each class not skipped: visit_item/visit_class, then methods and
    constructors ordered by `method_key` (each followed by its parameters),
    then fields ordered by `field_key`, then nested classes. Subclasses
    override the hooks and `skip`.
    """

    def __init__(
        self,
        method_key: Callable[[MethodItem], Any] = method_source_order,
        field_key: Callable[[FieldItem], Any] = field_name_order,
    ) -> None:
        self.method_key = method_key
        self.field_key = field_key

    # ---------------- Hooks ----------------

    def skip(self, item: Item) -> bool:
        if isinstance(item, ParameterItem):
            return False
        return item.visibility not in API_VISIBILITY

    def visit_item(self, item: Item) -> None:
        pass

    def visit_class(self, cls: ClassItem) -> None:
        pass

    def visit_method(self, method: MethodItem) -> None:
        pass

    def visit_field(self, f: FieldItem) -> None:
        pass

    def visit_parameter(self, parameter: ParameterItem) -> None:
        pass

    # ---------------- Traversal ----------------

    def visit_codebase(self, codebase: Codebase) -> None:
        for cls in codebase.classes():
            self._visit_class_tree(codebase, cls)

    def _visit_class_tree(self, codebase: Codebase, cls: ClassItem) -> None:
        if self.skip(cls):
            return
        self.visit_item(cls)
        self.visit_class(cls)

        for method in sorted(codebase.methods_of(cls), key=self.method_key):
            if self.skip(method):
                continue
            self.visit_item(method)
            self.visit_method(method)
            for parameter in codebase.parameters_of(method):
                if self.skip(parameter):
                    continue
                self.visit_item(parameter)
                self.visit_parameter(parameter)

        for f in sorted(codebase.fields_of(cls), key=self.field_key):
            if self.skip(f):
                continue
            self.visit_item(f)
            self.visit_field(f)

        for inner in sorted(codebase.nested_classes_of(cls), key=lambda c: c.qualified_name()):
            self._visit_class_tree(codebase, inner)
