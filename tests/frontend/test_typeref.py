import pytest

from fml.errors import (
    MalformedTypeExpression,
    TypeParsingError,
    UnsupportedMapKey,
)
from fml.frontend.typeref import (
    MAX_NESTING_DEPTH,
    parse_type_expression,
    resolve_type,
    tokenize,
    type_ref_from_string,
    TokenKind,
)
from fml.ir.schema import (
    BooleanType,
    BundleImageType,
    BundleTextType,
    EnumMapType,
    EnumType,
    IntType,
    ListType,
    ObjectType,
    OptionType,
    StringMapType,
    StringType,
)


# ---------------------------------------------------------------------------
# Tokenizer / parser
# ---------------------------------------------------------------------------

def test_tokenize_map_expression():
    tokens = tokenize("Map<String, List<Int>>")

    assert [t.kind for t in tokens] == [
        TokenKind.IDENT, TokenKind.LT,
        TokenKind.IDENT, TokenKind.COMMA,
        TokenKind.IDENT, TokenKind.LT, TokenKind.IDENT, TokenKind.GT,
        TokenKind.GT,
    ]
    assert [t.text for t in tokens if t.kind == TokenKind.IDENT] == ["Map", "String", "List", "Int"]


def test_parse_primitive_has_no_argument():
    assert parse_type_expression("String") == ("String", None)
    assert parse_type_expression("  Int  ") == ("Int", None)


def test_parse_primitive_ignores_trailing_text():
    assert parse_type_expression("Boolean<whatever") == ("Boolean", None)


def test_parse_generic_returns_raw_inner_argument():
    assert parse_type_expression("List<Option<Int>>") == ("List", "Option<Int>")
    assert parse_type_expression("Map<String, Int>") == ("Map", "String, Int")


def test_parse_generic_without_argument():
    assert parse_type_expression("BundleText") == ("BundleText", None)


@pytest.mark.parametrize("expr", [
    "",
    "   ",
    "<String>",
    "List<String",
    "List<String>>",
    "List<String> trailing",
    "Option Int",
])
def test_parse_rejects_malformed_brackets(expr):
    with pytest.raises(MalformedTypeExpression):
        parse_type_expression(expr)


def test_map_arguments_split_on_top_level_comma_only():
    assert type_ref_from_string("Map<String, Map<String, Int>>") == StringMapType(StringMapType(IntType()))
    assert parse_type_expression("Map<String, Map<String, Int>>") == ("Map", "String, Map<String, Int>")


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------

def test_primitives():
    assert type_ref_from_string("String") == StringType()
    assert type_ref_from_string("Int") == IntType()
    assert type_ref_from_string("Boolean") == BooleanType()


@pytest.mark.parametrize("expr", ["string", "str", "integer", "int", "boolean", "bool"])
def test_primitive_names_are_case_sensitive(expr):
    with pytest.raises(TypeParsingError):
        type_ref_from_string(expr)


# ---------------------------------------------------------------------------
# Named types
# ---------------------------------------------------------------------------

def test_named_types():
    assert type_ref_from_string("BundleText<test_name>") == BundleTextType("test_name")
    assert type_ref_from_string("BundleImage<test_name>") == BundleImageType("test_name")
    assert type_ref_from_string("Enum<test_name>") == EnumType("test_name")
    assert type_ref_from_string("Object<test_name>") == ObjectType("test_name")


def test_named_type_tolerates_whitespace():
    assert type_ref_from_string("Enum < PlayerProfile >") == EnumType("PlayerProfile")


@pytest.mark.parametrize("expr", ["BundleText", "BundleImage", "Enum", "Object", "BundleText<>", "Enum<  >"])
def test_named_type_without_argument_is_malformed(expr):
    with pytest.raises(MalformedTypeExpression):
        type_ref_from_string(expr)


def test_named_type_argument_must_be_a_single_name():
    with pytest.raises(MalformedTypeExpression):
        type_ref_from_string("Object<List<Button>>")


@pytest.mark.parametrize("expr", [
    "bundletext(something)",
    "BundleText()",
    "enum(something)",
    "Enum()",
    "object(something)",
    "Object()",
])
def test_named_type_with_wrong_brackets_is_not_recognized(expr):
    with pytest.raises(TypeParsingError) as exc:
        type_ref_from_string(expr)

    assert exc.value.code == "TYPE_PARSING_ERROR"
    assert expr in exc.value.message


# ---------------------------------------------------------------------------
# Containers
# ---------------------------------------------------------------------------

def test_list_and_option():
    assert type_ref_from_string("List<String>") == ListType(StringType())
    assert type_ref_from_string("List<Int>") == ListType(IntType())
    assert type_ref_from_string("Option<Boolean>") == OptionType(BooleanType())
    assert type_ref_from_string("List<Object<Button>>") == ListType(ObjectType("Button"))


@pytest.mark.parametrize("expr", ["list(something)", "List()", "option(something)", "Option(Something)"])
def test_container_with_wrong_brackets(expr):
    with pytest.raises(TypeParsingError):
        type_ref_from_string(expr)


@pytest.mark.parametrize("expr", ["List", "Option", "List<>", "Map", "Map<>"])
def test_container_without_argument_is_malformed(expr):
    with pytest.raises(MalformedTypeExpression):
        type_ref_from_string(expr)


def test_list_of_unknown_type():
    with pytest.raises(TypeParsingError):
        type_ref_from_string("List<PlayerProfile>")


# ---------------------------------------------------------------------------
# Maps
# ---------------------------------------------------------------------------

def test_string_maps():
    assert type_ref_from_string("Map<String, String>") == StringMapType(StringType())
    assert type_ref_from_string("Map<String, Int>") == StringMapType(IntType())
    assert type_ref_from_string("Map<String,Boolean>") == StringMapType(BooleanType())


def test_enum_map():
    assert type_ref_from_string("Map<Enum<Foo>, String>") == EnumMapType(EnumType("Foo"), StringType())


def test_enum_map_key_with_whitespace():
    assert type_ref_from_string("Map< Enum <Foo> , Int>") == EnumMapType(EnumType("Foo"), IntType())


def test_map_with_nested_map_value():
    assert type_ref_from_string("Map<String, Map<Enum<Foo>, List<Int>>>") == StringMapType(
        EnumMapType(EnumType("Foo"), ListType(IntType()))
    )


@pytest.mark.parametrize("expr", [
    "Map<Int, String>",
    "Map<Boolean, String>",
    "Map<Object<Button>, String>",
    "Map<List<String>, Int>",
    "Map<PlayerProfile, Int>",
])
def test_unsupported_map_keys(expr):
    with pytest.raises(UnsupportedMapKey):
        type_ref_from_string(expr)


@pytest.mark.parametrize("expr", ["Map<String>", "Map<String, >", "Map<String, Int, Int>", "Map<, Int>"])
def test_map_needs_exactly_two_arguments(expr):
    with pytest.raises(MalformedTypeExpression):
        type_ref_from_string(expr)


def test_map_with_wrong_brackets():
    with pytest.raises(TypeParsingError):
        type_ref_from_string("Map(Something)")


# ---------------------------------------------------------------------------
# Nesting
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("depth", [1, 2, 3, 5, 8])
def test_nesting_mirrors_expression(depth):
    wrappers = [
        ("List<{}>", ListType),
        ("Option<{}>", OptionType),
        ("Map<String, {}>", StringMapType),
        ("Map<Enum<Key>, {}>", lambda inner: EnumMapType(EnumType("Key"), inner)),
    ]

    expr = "Int"
    expected = IntType()
    for level in range(depth):
        template, build = wrappers[level % len(wrappers)]
        expr = template.format(expr)
        expected = build(expected)

    assert type_ref_from_string(expr) == expected


def test_resolve_type_directly():
    assert resolve_type("Option", "Enum<PlayerProfile>") == OptionType(EnumType("PlayerProfile"))

    with pytest.raises(MalformedTypeExpression):
        resolve_type("List", None)

    with pytest.raises(TypeParsingError) as exc:
        resolve_type("Vector", "Int")
    assert "Vector" in exc.value.message


def test_resolved_type_renders_back_to_expression():
    expr = "Map<Enum<Foo>, List<Option<BundleText<key>>>>"
    assert str(type_ref_from_string(expr)) == expr


def test_nesting_up_to_the_limit_resolves():
    expr = "List<" * MAX_NESTING_DEPTH + "Int" + ">" * MAX_NESTING_DEPTH

    typ = type_ref_from_string(expr)
    for _ in range(MAX_NESTING_DEPTH):
        assert isinstance(typ, ListType)
        typ = typ.inner
    assert typ == IntType()


@pytest.mark.parametrize("expr", [
    "List<" * 600 + "Int" + ">" * 600,
    "Map<String, " * 600 + "Int" + ">" * 600,
    "Option<" * (MAX_NESTING_DEPTH + 1) + "Int" + ">" * (MAX_NESTING_DEPTH + 1),
])
def test_excessive_nesting_is_malformed(expr):
    with pytest.raises(MalformedTypeExpression) as exc:
        type_ref_from_string(expr)

    assert str(MAX_NESTING_DEPTH) in exc.value.message
