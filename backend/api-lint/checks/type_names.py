from __future__ import annotations

from typing import Optional, Tuple

from apimodel.model import MethodItem

PRIMITIVES = {
    "boolean", "byte", "char", "short", "int", "long", "float", "double", "void",
}
PRIMITIVES |= {f"{p}[]" for p in PRIMITIVES if p != "void"}


def _import_table(method: MethodItem) -> Optional[Tuple[str, ...]]:
    return method.containing_class.unit.imports


def resolve_short_name(name: str, method: MethodItem) -> str:
    """
    Qualify a single (non-generic) type name in the context of `method`:
    already qualified -> as is, String -> java.lang.String, primitives ->
    as is, then the import table, then the enclosing package.
    """
    if "." in name:
        return name
    if name == "String":
        return "java.lang.String"
    if name == "String[]":
        return "java.lang.String[]"
    if name in PRIMITIVES:
        return name

    # first match wins, in import order
    for qualified in _import_table(method) or ():
        if qualified.split(".")[-1] == name:
            return qualified

    package = method.containing_class.package
    return f"{package}.{name}" if package else name


def qualify_type_name(type_string: str, method: MethodItem) -> str:
    """
    Qualify a rendered type: arrays and varargs recurse on the element type,
    generics qualify the raw type and the first-level argument text separately.
    """
    if type_string.endswith("..."):
        return qualify_type_name(type_string[:-3], method) + "..."
    if type_string.endswith("[]"):
        return qualify_type_name(type_string[:-2], method) + "[]"
    if "<" in type_string and ">" in type_string:
        lt = type_string.index("<")
        left = type_string[:lt]
        right = type_string[lt + 1:type_string.index(">")]
        return f"{resolve_short_name(left, method)}<{resolve_short_name(right, method)}>"
    return resolve_short_name(type_string, method)
