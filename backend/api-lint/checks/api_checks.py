from __future__ import annotations

import re
from typing import Iterable, List, Optional

import config
from apimodel.codebase import Codebase
from apimodel.model import Annotation, FieldItem, Item, MethodItem, ParameterItem, ClassItem
from checks.diagnostics import Issue, Reporter
from checks.doc_tags import RETURN_TAG, DocumentationCache
from checks.permission_report import (
    FieldPermissionRecord,
    MethodPermissionRecord,
    PermissionReport,
)
from checks.type_names import qualify_type_name
from checks.visitor import ApiVisitor, field_name_order, method_source_order

# prose like FOO_BAR or FOO_* hinting at an enumerated constant set
CONSTANT_PATTERN = re.compile(r"[A-Z]{3,}_([A-Z]{3,}|\*)")
NULL_PATTERN = re.compile(r"\bnull\b")


class _ChecksVisitor(ApiVisitor):
    def __init__(self, checks: "ApiChecks") -> None:
        # sort by source order such that warnings follow source line order
        super().__init__(method_key=method_source_order, field_key=field_name_order)
        self.checks = checks

    def skip(self, item: Item) -> bool:
        if isinstance(item, ClassItem):
            return not self.checks.in_namespace(item.qualified_name())
        return super().skip(item)

    def visit_item(self, item: Item) -> None:
        self.checks.check_todos(item)

    def visit_method(self, method: MethodItem) -> None:
        self.checks.check_requires_permission(method)
        if not method.is_constructor:
            self.checks.check_variable(
                method, RETURN_TAG, f"Return value of '{method.name}'", method.return_type
            )

    def visit_field(self, f: FieldItem) -> None:
        if "ACTION" in f.name:
            self.checks.check_intent_action(f)
        self.checks.check_variable(f, None, f"Field '{f.name}'", f.type)

    def visit_parameter(self, parameter: ParameterItem) -> None:
        self.checks.check_variable(
            parameter,
            parameter.name,
            f"Parameter '{parameter.name}' of '{parameter.containing_method.name}'",
            parameter.type,
        )


class ApiChecks:
    """
    Misc API documentation checks plus permission metadata extraction.

    The caller owns the Reporter and the PermissionReport; check() only
    feeds them. The report must be started before check() runs.
    """

    def __init__(
        self,
        reporter: Reporter,
        report: PermissionReport,
        doc_cache: Optional[DocumentationCache] = None,
        include_prefixes: Iterable[str] | None = None,
        exclude_prefixes: Iterable[str] | None = None,
    ) -> None:
        self.reporter = reporter
        self.report = report
        self.doc_cache = doc_cache or DocumentationCache()
        self.include_prefixes = tuple(include_prefixes if include_prefixes is not None else config.INCLUDE_PREFIXES)
        self.exclude_prefixes = tuple(exclude_prefixes if exclude_prefixes is not None else config.EXCLUDE_PREFIXES)
        self.codebase: Optional[Codebase] = None

    def in_namespace(self, qualified_name: str) -> bool:
        if not qualified_name.startswith(self.include_prefixes):
            return False
        return not qualified_name.startswith(self.exclude_prefixes)

    def check(self, codebase: Codebase) -> None:
        self.codebase = codebase
        # item ids repeat across codebases
        self.doc_cache.clear()
        _ChecksVisitor(self).visit_codebase(codebase)

    # ---------------- Rules ----------------

    def check_todos(self, item: Item) -> None:
        doc = item.documentation
        if "TODO:" in doc or "TODO(" in doc:
            self.reporter.report(Issue.TODO, item, "Documentation mentions 'TODO'")

    def check_variable(self, item: Item, tag: Optional[str], ident: str, type_name: Optional[str]) -> None:
        if type_name is None:
            return

        if type_name == "int" and CONSTANT_PATTERN.search(self.doc_cache.get(item, tag)):
            if not any(self._declares_int_def(a) for a in item.annotations):
                self.reporter.report(
                    Issue.INT_DEF, item,
                    f"{ident} documentation mentions constants without declaring an @IntDef",
                )

        if NULL_PATTERN.search(self.doc_cache.get(item, tag)) and not item.has_nullness_info():
            self.reporter.report(
                Issue.NULLABLE, item,
                f"{ident} documentation mentions 'null' without declaring @NonNull or @Nullable",
            )

    def _declares_int_def(self, annotation: Annotation) -> bool:
        if self.codebase is None:
            return False
        cls = self.codebase.resolve_annotation(annotation)
        if cls is None:
            return False
        return any(a.qualified_name in config.INT_DEF_ANNOTATIONS for a in cls.annotations)

    def _permissions(self, kind: str, name: str, values) -> List[str]:
        perms: List[str] = []
        for value in values:
            perm = value.to_source()
            if "." in perm:
                perm = perm[perm.rindex(".") + 1:]
            if config.VERBOSE:
                print(f"{kind} {name} permission {perm}")
            perms.append(config.PERMISSION_PREFIX + perm)
        return perms

    def _permission_attributes(self, item: Item):
        annotation = item.find_annotation(config.PERMISSION_ANNOTATION)
        if annotation is None:
            return
        for attribute in annotation.attributes:
            if attribute.name not in config.PERMISSION_ATTRIBUTES:
                continue
            values = attribute.leaf_values()
            if not values:
                continue
            yield attribute.name, values

    def check_requires_permission(self, method: MethodItem) -> None:
        for attribute, values in self._permission_attributes(method):
            params = []
            if self.codebase is not None:
                params = [
                    qualify_type_name(p.type, method)
                    for p in self.codebase.parameters_of(method)
                    if p.type is not None
                ]
            record = MethodPermissionRecord(
                method_name=method.name,
                attribute=attribute,
                class_name=method.containing_class.qualified_name(),
                return_type=qualify_type_name(method.return_type or "void", method),
                params=params,
                permissions=self._permissions("Method", method.name, values),
            )
            self.report.insert_method_record(record)

    def check_intent_action(self, f: FieldItem) -> None:
        for attribute, values in self._permission_attributes(f):
            record = FieldPermissionRecord(
                field_name=f.name,
                attribute=attribute,
                class_name=f.containing_class.qualified_name(),
                value=f.initial_value,
                permissions=self._permissions("Field", f.name, values),
            )
            self.report.insert_field_record(record)
