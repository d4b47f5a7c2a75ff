import os
import sys

CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.dirname(CURRENT_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from apimodel.model import ClassItem, CompilationUnit, MethodItem
from checks.type_names import qualify_type_name, resolve_short_name


def make_method(package="android.app", imports=("com.example.Foo",)):
    unit = CompilationUnit(package=package, imports=imports)
    full = f"{package}.Mgr" if package else "Mgr"
    cls = ClassItem(id=f"class:{full}", name="Mgr", full_name=full, unit=unit)
    return MethodItem(id=f"method:{full}:m:0", name="m", containing_class=cls)


def test_primitives_pass_through():
    m = make_method()
    assert qualify_type_name("int[]", m) == "int[]"
    assert qualify_type_name("boolean", m) == "boolean"
    assert qualify_type_name("void", m) == "void"
    assert qualify_type_name("long[][]", m) == "long[][]"


def test_generic_without_import_uses_package():
    m = make_method()
    assert qualify_type_name("List<String>", m) == "android.app.List<java.lang.String>"


def test_generic_with_import():
    m = make_method(imports=("java.util.List", "com.example.Foo"))
    assert qualify_type_name("List<Foo>", m) == "java.util.List<com.example.Foo>"


def test_import_table_lookup():
    m = make_method()
    assert qualify_type_name("Foo", m) == "com.example.Foo"
    assert qualify_type_name("Foo[]", m) == "com.example.Foo[]"
    assert qualify_type_name("Bar", m) == "android.app.Bar"


def test_string_special_case():
    m = make_method()
    assert qualify_type_name("String", m) == "java.lang.String"
    assert qualify_type_name("String[]", m) == "java.lang.String[]"
    assert resolve_short_name("String[]", m) == "java.lang.String[]"


def test_already_qualified_is_unchanged():
    m = make_method()
    assert qualify_type_name("java.io.File", m) == "java.io.File"
    assert qualify_type_name("java.util.List<java.io.File>", m) == "java.util.List<java.io.File>"


def test_first_matching_import_wins():
    m = make_method(imports=("a.Foo", "b.Foo"))
    assert resolve_short_name("Foo", m) == "a.Foo"


def test_import_match_is_on_last_segment_only():
    m = make_method(imports=("com.example.FooBar",))
    assert resolve_short_name("Bar", m) == "android.app.Bar"


def test_missing_import_table_and_default_package():
    assert resolve_short_name("Foo", make_method(imports=None)) == "android.app.Foo"
    assert resolve_short_name("Foo", make_method(package=None, imports=None)) == "Foo"


def test_varargs_recurse_like_arrays():
    m = make_method()
    assert qualify_type_name("Foo...", m) == "com.example.Foo..."
    assert qualify_type_name("String...", m) == "java.lang.String..."
    assert qualify_type_name("int...", m) == "int..."
