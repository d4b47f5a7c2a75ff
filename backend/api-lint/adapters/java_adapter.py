import javalang  # type: ignore
from javalang import tree as jt  # type: ignore
from typing import Any, Dict, Iterable, List, Optional, Tuple

from apimodel.model import (
    Annotation,
    AnnotationAttribute,
    AnnotationValue,
    ClassItem,
    CompilationUnit,
    FieldItem,
    MethodItem,
    ParameterItem,
)
from apimodel.codebase import Codebase

class JavaAdapter:
    """
    Java → Codebase builder.
    Parses one or more Java compilation units and creates nodes for
    classes/methods/fields/parameters with their javadoc, annotations and
    rendered types, plus edges:
      - HAS_METHOD, HAS_FIELD, PARAM_OF
      - NESTED_IN (inner class -> outer class)

    Includes:
      - Multi-file (project-level) support
      - Type rendering as written (qualified prefixes, generics, arrays, varargs)
      - Annotation attributes flattened to leaf values
      - Import table per compilation unit (single-type, non-static imports)
      - Implicitly public interface / annotation members
      - Enum constants as fields, @interface elements as methods
      - Skips invalid Java files during project parsing (collect errors)
    """

    language = "java"

    # ---------------- Helpers ----------------

    def _visibility_from_mods(self, mods: set[str] | None, implicit_public: bool = False) -> str:
        mods = mods or set()
        if "public" in mods:
            return "public"
        if "private" in mods:
            return "private"
        if "protected" in mods:
            return "protected"
        return "public" if implicit_public else "package"

    def _line(self, node) -> Optional[int]:
        pos = getattr(node, "position", None)
        return getattr(pos, "line", None) if pos else None

    def _render_type(self, t) -> Optional[str]:
        """
        From a javalang Type node, render the type the way it was written:
          java.util.List<String>, Map<String,Integer>, int[], Foo.Bar
        """
        if t is None:
            return None

        parts: List[str] = []
        node = t
        while node is not None:
            name = getattr(node, "name", "Object")
            args = getattr(node, "arguments", None)
            if args:
                name += "<" + ",".join(self._render_type_argument(a) for a in args) + ">"
            parts.append(name)
            node = getattr(node, "sub_type", None)

        dims = getattr(t, "dimensions", None) or []
        return ".".join(parts) + "[]" * len(dims)

    def _render_type_argument(self, arg) -> str:
        pattern = getattr(arg, "pattern_type", None)
        inner = self._render_type(getattr(arg, "type", None))
        if pattern == "?" or inner is None:
            return "?"
        if pattern in ("extends", "super"):
            return f"? {pattern} {inner}"
        return inner

    def _unquote(self, text: str) -> str:
        body = text[1:-1]
        return (
            body.replace('\\"', '"')
            .replace("\\'", "'")
            .replace("\\n", "\n")
            .replace("\\t", "\t")
            .replace("\\\\", "\\")
        )

    def _parse_number(self, source: str) -> Any:
        # Java numeric literal: 0x/0b prefixes, leading-0 octal, '_' separators, type suffixes
        text = source.replace("_", "")
        digits = text.rstrip("lL")
        unsigned = digits.lstrip("-").lower()
        try:
            if unsigned.startswith(("0x", "0b")):
                return int(digits, 0)
            if len(unsigned) > 1 and unsigned.startswith("0") and unsigned.isdigit():
                return int(digits, 8)
            return int(digits, 10)
        except ValueError:
            pass
        try:
            return float(text.rstrip("fFdD"))
        except ValueError:
            return None

    def _render_expression(self, node) -> Tuple[str, Any]:
        """
        Render an annotation element / initializer expression.
        Returns (source_text, python_value); python_value is None unless the
        expression is a literal (or a concatenation of string literals).
        """
        if isinstance(node, jt.Literal):
            raw = node.value or ""
            negative = "-" in (getattr(node, "prefix_operators", None) or [])
            if raw.startswith('"'):
                text = self._unquote(raw)
                return text, text
            if raw in ("true", "false"):
                return raw, raw == "true"
            if raw == "null":
                return raw, None
            if raw.startswith("'"):
                return raw, raw
            source = f"-{raw}" if negative else raw
            return source, self._parse_number(source)

        if isinstance(node, jt.MemberReference):
            qualifier = node.qualifier or ""
            text = f"{qualifier}.{node.member}" if qualifier else node.member
            return text, None

        if isinstance(node, jt.BinaryOperation):
            left, lval = self._render_expression(node.operandl)
            right, rval = self._render_expression(node.operandr)
            if node.operator == "+" and isinstance(lval, str) and isinstance(rval, str):
                return lval + rval, lval + rval
            return f"{left} {node.operator} {right}", None

        return type(node).__name__, None

    def _leaf_values(self, node) -> Iterable[AnnotationValue]:
        if node is None:
            return
        if isinstance(node, list):
            # javalang hands back a bare list for an empty `{}`
            for v in node:
                yield from self._leaf_values(v)
            return
        if isinstance(node, jt.ElementArrayValue):
            for v in node.values or []:
                yield from self._leaf_values(v)
            return
        if isinstance(node, jt.ArrayInitializer):
            for v in node.initializers or []:
                yield from self._leaf_values(v)
            return
        if isinstance(node, jt.Annotation):
            # nested annotations (e.g. RequiresPermission.Read) carry no literal
            return
        source, value = self._render_expression(node)
        yield AnnotationValue(source=source, value=value)

    def _qualify_annotation_name(
        self, name: str, unit: CompilationUnit, scope: Optional[ClassItem]
    ) -> Tuple[str, Tuple[str, ...]]:
        """
        Returns (qualified_name, lookup_names). Lookup names list the
        enclosing-class candidates before the package one so that nested
        annotation types declared next to their use resolve.
        """
        pkg = unit.package or ""
        if "." in name:
            lookups = [name]
            if pkg:
                lookups.append(f"{pkg}.{name}")
            return name, tuple(lookups)

        for imp in unit.imports or ():
            if imp.split(".")[-1] == name:
                return imp, (imp,)

        lookups = []
        c = scope
        while c is not None:
            lookups.append(f"{c.qualified_name()}.{name}")
            c = c.containing_class
        qualified = f"{pkg}.{name}" if pkg else name
        lookups.append(qualified)
        return qualified, tuple(lookups)

    def _annotations(
        self, nodes, unit: CompilationUnit, scope: Optional[ClassItem]
    ) -> Tuple[Annotation, ...]:
        result: List[Annotation] = []
        for ann in nodes or []:
            element = getattr(ann, "element", None)
            attrs: List[AnnotationAttribute] = []
            if isinstance(element, list):
                for pair in element:
                    attrs.append(AnnotationAttribute(pair.name, tuple(self._leaf_values(pair.value))))
            elif element is not None:
                attrs.append(AnnotationAttribute("value", tuple(self._leaf_values(element))))

            qualified, lookups = self._qualify_annotation_name(ann.name, unit, scope)
            result.append(
                Annotation(
                    name=ann.name,
                    qualified_name=qualified,
                    attributes=tuple(attrs),
                    lookup_names=lookups,
                )
            )
        return tuple(result)

    def _members(self, t) -> List[Any]:
        body = getattr(t, "body", None) or []
        if isinstance(body, jt.EnumBody):
            return list(body.constants or []) + list(body.declarations or [])
        return list(body)

    # ---------------- Parsing entry points ----------------

    def parse_to_ast(self, code: str):
        try:
            return javalang.parse.parse(code)
        except javalang.parser.JavaSyntaxError as e:
            raise ValueError(f"Java syntax error: {getattr(e, 'description', e)}")
        except javalang.tokenizer.LexerError as e:
            raise ValueError(f"Java lexer error: {e}")
        except Exception as e:
            raise ValueError(f"Failed to parse Java code: {e}")

    def build_codebase_for_code(self, code: str, filename: str | None = None) -> Codebase:
        """
        Single-compilation-unit helper (for /check and /parse).
        """
        codebase = Codebase()
        self._process_compilation_unit(code, codebase, source_file=filename)
        return codebase

    def build_codebase_for_sources(self, sources: List[Tuple[str, str]]) -> Codebase:
        """
        Multi-unit builder over (path, code) pairs.
        Skips invalid Java sources but continues parsing the rest.
        """
        codebase = Codebase()
        for path, code in sources:
            try:
                self._process_compilation_unit(code, codebase, source_file=path)
            except ValueError as e:
                print(f"[API LINT] Skipping {path}: {e}")
                codebase.parse_errors.append({"file": path, "error": str(e)})
        return codebase

    def build_codebase_for_files(self, files: List[str]) -> Codebase:
        """
        Multi-file/project-level builder reading sources from disk.
        """
        sources: List[Tuple[str, str]] = []
        for path in files:
            with open(path, "r", encoding="utf-8") as f:
                sources.append((path, f.read()))
        return self.build_codebase_for_sources(sources)

    # ---------------- Core processing ----------------

    def _process_compilation_unit(
        self,
        code: str,
        codebase: Codebase,
        source_file: str | None = None,
    ) -> None:
        tree = self.parse_to_ast(code)
        package_name = getattr(getattr(tree, "package", None), "name", None)

        imports = tuple(
            imp.path
            for imp in (tree.imports or [])
            if not imp.static and not imp.wildcard
        )
        unit = CompilationUnit(
            package=package_name,
            imports=imports if tree.imports else None,
            source_file=source_file,
        )

        for t in tree.types or []:
            self._process_type(t, codebase, unit, outer=None)

    def _process_type(
        self,
        t,
        codebase: Codebase,
        unit: CompilationUnit,
        outer: Optional[ClassItem],
    ) -> ClassItem:
        if outer is not None:
            full_name = f"{outer.qualified_name()}.{t.name}"
        else:
            full_name = f"{unit.package}.{t.name}" if unit.package else t.name

        kind = type(t).__name__.replace("Declaration", "").lower()
        outer_is_interface = outer is not None and outer.kind in ("interface", "annotation")

        cls = ClassItem(
            id=f"class:{full_name}",
            name=t.name,
            full_name=full_name,
            kind=kind,
            visibility=self._visibility_from_mods(t.modifiers, implicit_public=outer_is_interface),
            modifiers=tuple(sorted(t.modifiers or [])),
            documentation=t.documentation or "",
            unit=unit,
            containing_class=outer,
            annotations=self._annotations(t.annotations, unit, outer),
            line=self._line(t),
        )
        codebase.add_node(cls.id, "Class", cls)
        if outer is not None:
            codebase.add_edge(cls.id, outer.id, "NESTED_IN")

        members_public = kind in ("interface", "annotation")

        for order, member in enumerate(self._members(t)):
            # ---------- fields ----------
            if isinstance(member, jt.FieldDeclaration):
                type_str = self._render_type(member.type)
                for decl in member.declarators:
                    field_id = f"field:{full_name}:{decl.name}"
                    source, value = (
                        self._render_expression(decl.initializer)
                        if decl.initializer is not None
                        else (None, None)
                    )
                    dims = len(getattr(decl, "dimensions", None) or [])
                    field_node = FieldItem(
                        id=field_id,
                        name=decl.name,
                        containing_class=cls,
                        type=(type_str + "[]" * dims) if type_str else None,
                        initial_value=value if value is not None else source,
                        visibility=self._visibility_from_mods(member.modifiers, members_public),
                        modifiers=tuple(sorted(member.modifiers or [])),
                        documentation=member.documentation or "",
                        annotations=self._annotations(member.annotations, unit, cls),
                        source_order=order,
                        line=self._line(member),
                    )
                    codebase.add_node(field_id, "Field", field_node)
                    codebase.add_edge(cls.id, field_id, "HAS_FIELD")

            # ---------- methods / constructors ----------
            elif isinstance(member, (jt.MethodDeclaration, jt.ConstructorDeclaration)):
                is_ctor = isinstance(member, jt.ConstructorDeclaration)
                prefix = "ctor" if is_ctor else "method"
                method_id = f"{prefix}:{full_name}:{member.name}:{order}"
                return_type = (
                    full_name if is_ctor else (self._render_type(member.return_type) or "void")
                )
                method_node = MethodItem(
                    id=method_id,
                    name=member.name,
                    containing_class=cls,
                    return_type=return_type,
                    visibility=self._visibility_from_mods(member.modifiers, members_public),
                    modifiers=tuple(sorted(member.modifiers or [])),
                    documentation=member.documentation or "",
                    annotations=self._annotations(member.annotations, unit, cls),
                    is_constructor=is_ctor,
                    source_order=order,
                    line=self._line(member),
                )
                codebase.add_node(method_id, "Method", method_node)
                codebase.add_edge(cls.id, method_id, "HAS_METHOD")

                for index, p in enumerate(member.parameters or []):
                    p_id = f"param:{full_name}:{member.name}:{order}:{p.name}"
                    p_type = self._render_type(p.type)
                    if p_type and getattr(p, "varargs", False):
                        p_type += "..."
                    param_node = ParameterItem(
                        id=p_id,
                        name=p.name,
                        containing_method=method_node,
                        type=p_type,
                        index=index,
                        annotations=self._annotations(p.annotations, unit, cls),
                        modifiers=tuple(sorted(p.modifiers or [])),
                    )
                    codebase.add_node(p_id, "Parameter", param_node)
                    codebase.add_edge(p_id, method_id, "PARAM_OF")

            # ---------- enum constants (public static final fields of the enum type) ----------
            elif isinstance(member, jt.EnumConstantDeclaration):
                field_id = f"field:{full_name}:{member.name}"
                field_node = FieldItem(
                    id=field_id,
                    name=member.name,
                    containing_class=cls,
                    type=full_name,
                    visibility="public",
                    modifiers=("final", "public", "static"),
                    documentation=getattr(member, "documentation", None) or "",
                    annotations=self._annotations(member.annotations, unit, cls),
                    source_order=order,
                    line=self._line(member),
                )
                codebase.add_node(field_id, "Field", field_node)
                codebase.add_edge(cls.id, field_id, "HAS_FIELD")

            # ---------- @interface elements ----------
            elif isinstance(member, jt.AnnotationMethod):
                method_id = f"method:{full_name}:{member.name}:{order}"
                return_type = self._render_type(member.return_type)
                dims = len(getattr(member, "dimensions", None) or [])
                method_node = MethodItem(
                    id=method_id,
                    name=member.name,
                    containing_class=cls,
                    return_type=(return_type + "[]" * dims) if return_type else None,
                    visibility=self._visibility_from_mods(member.modifiers, implicit_public=True),
                    modifiers=tuple(sorted(member.modifiers or [])),
                    documentation=getattr(member, "documentation", None) or "",
                    annotations=self._annotations(member.annotations, unit, cls),
                    source_order=order,
                    line=self._line(member),
                )
                codebase.add_node(method_id, "Method", method_node)
                codebase.add_edge(cls.id, method_id, "HAS_METHOD")

            # ---------- nested types ----------
            elif isinstance(member, jt.TypeDeclaration):
                self._process_type(member, codebase, unit, outer=cls)

        return cls
