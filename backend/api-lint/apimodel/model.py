from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Literal, Optional, Tuple

import config

Visibility = Literal["public", "protected", "private", "package"]


@dataclass
class AnnotationValue:
    source: str               # rendered source text (string literals unquoted)
    value: Any = None         # python value for literals, else None

    def to_source(self) -> str:
        return self.source


@dataclass
class AnnotationAttribute:
    name: str
    values: Tuple[AnnotationValue, ...] = ()   # already flattened

    def leaf_values(self) -> List[AnnotationValue]:
        return list(self.values)


@dataclass
class Annotation:
    name: str                 # as written, e.g. RequiresPermission
    qualified_name: str       # best effort (explicit, import, package)
    attributes: Tuple[AnnotationAttribute, ...] = ()
    lookup_names: Tuple[str, ...] = ()   # candidates for resolve_annotation

    @property
    def simple_name(self) -> str:
        return self.name.split(".")[-1]

    def find_attribute(self, name: str) -> Optional[AnnotationAttribute]:
        for attr in self.attributes:
            if attr.name == name:
                return attr
        return None


@dataclass
class CompilationUnit:
    package: Optional[str] = None
    imports: Optional[Tuple[str, ...]] = None   # single-type imports, in order
    source_file: Optional[str] = None


class ItemMixin:
    """
    Behaviour shared by every item kind. Dataclasses below carry the data,
    each declares `id`, `name`, `documentation` and `annotations`.
    """

    def has_nullness_info(self) -> bool:
        return any(a.simple_name in config.NULLNESS_ANNOTATIONS for a in self.annotations)

    def find_annotation(self, simple_name: str) -> Optional[Annotation]:
        for a in self.annotations:
            if a.simple_name == simple_name:
                return a
        return None

    def location(self) -> str:
        source_file = self.source_file() or "<unknown>"
        line = getattr(self, "line", None)
        return f"{source_file}:{line}" if line else source_file


@dataclass(eq=False)
class ClassItem(ItemMixin):
    id: str
    name: str
    full_name: str                     # package + enclosing classes + name
    kind: Literal["class", "interface", "enum", "annotation"] = "class"
    visibility: Visibility = "package"
    modifiers: Tuple[str, ...] = ()
    documentation: str = ""
    annotations: Tuple[Annotation, ...] = ()
    unit: CompilationUnit = field(default_factory=CompilationUnit, repr=False)
    containing_class: Optional["ClassItem"] = field(default=None, repr=False)
    line: Optional[int] = None

    def qualified_name(self) -> str:
        return self.full_name

    @property
    def package(self) -> str:
        return self.unit.package or ""

    def source_file(self) -> Optional[str]:
        return self.unit.source_file


@dataclass(eq=False)
class MethodItem(ItemMixin):
    id: str
    name: str
    containing_class: ClassItem = field(repr=False)
    return_type: Optional[str] = "void"
    visibility: Visibility = "package"
    modifiers: Tuple[str, ...] = ()
    documentation: str = ""
    annotations: Tuple[Annotation, ...] = ()
    is_constructor: bool = False
    source_order: int = 0              # declaration index in the class body
    line: Optional[int] = None

    def qualified_name(self) -> str:
        return f"{self.containing_class.qualified_name()}.{self.name}"

    def source_file(self) -> Optional[str]:
        return self.containing_class.source_file()


@dataclass(eq=False)
class FieldItem(ItemMixin):
    id: str
    name: str
    containing_class: ClassItem = field(repr=False)
    type: Optional[str] = None
    initial_value: Any = None          # rendered initializer, None if absent
    visibility: Visibility = "package"
    modifiers: Tuple[str, ...] = ()
    documentation: str = ""
    annotations: Tuple[Annotation, ...] = ()
    source_order: int = 0
    line: Optional[int] = None

    def qualified_name(self) -> str:
        return f"{self.containing_class.qualified_name()}.{self.name}"

    def source_file(self) -> Optional[str]:
        return self.containing_class.source_file()


@dataclass(eq=False)
class ParameterItem(ItemMixin):
    id: str
    name: str
    containing_method: MethodItem = field(repr=False)
    type: Optional[str] = None
    index: int = 0
    annotations: Tuple[Annotation, ...] = ()
    modifiers: Tuple[str, ...] = ()
    # @param text lives on the method; parameters carry none of their own
    documentation: str = ""

    @property
    def line(self) -> Optional[int]:
        return self.containing_method.line

    def qualified_name(self) -> str:
        return f"{self.containing_method.qualified_name()}#{self.name}"

    def source_file(self) -> Optional[str]:
        return self.containing_method.source_file()


Item = ClassItem | MethodItem | FieldItem | ParameterItem
