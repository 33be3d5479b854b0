from typefind.matcher import TypeMatcher
from typefind.query import QueryDescriptor
from typefind.semantic.model import (
    BasicType,
    NamedType,
    Object,
    ObjectKind,
    OpaqueType,
    PointerType,
    SignatureType,
)


def test_named_type_matches(client_query, client_types):
    m = TypeMatcher(client_query)
    assert m.matches(client_types["named"]) is True


def test_pointer_indirection_is_stripped(client_query, client_types):
    m = TypeMatcher(client_query)
    assert m.matches(client_types["ptr"]) is True
    assert m.matches(PointerType(client_types["ptr"])) is True


def test_selector_is_a_strict_gate(client_query, timeout_query, client_types):
    assert TypeMatcher(client_query).matches(client_types["named"], "Timeout") is False
    assert TypeMatcher(timeout_query).matches(client_types["named"]) is False
    assert TypeMatcher(timeout_query).matches(client_types["named"], "Transport") is False
    assert TypeMatcher(timeout_query).matches(client_types["ptr"], "Timeout") is True


def test_other_package_or_name_does_not_match(client_query):
    m = TypeMatcher(client_query)
    assert m.matches(NamedType("Client", package="example.com/http")) is False
    assert m.matches(NamedType("Request", package="net/http")) is False


def test_unnamed_types_never_match(client_query, client_types):
    m = TypeMatcher(client_query)
    assert m.matches(client_types["struct"]) is False
    assert m.matches(BasicType("int")) is False
    assert m.matches(OpaqueType("[]*Client")) is False
    assert m.matches(SignatureType()) is False
    assert m.matches(None) is False
    assert m.matches(PointerType(None)) is False


def test_universe_types_never_match():
    # `error` has no declaring package
    m = TypeMatcher(QueryDescriptor("", "error"))
    assert m.matches(NamedType("error", package=None)) is False


def test_callable_matches_by_package_and_name():
    m = TypeMatcher(QueryDescriptor("encoding/json", "NewEncoder"))
    fn = Object(ObjectKind.FUNC, "NewEncoder", package="encoding/json", type=SignatureType())
    assert m.matches_callable(fn) is True
    # the type path alone would reject a signature
    assert m.matches(fn.type) is False


def test_callable_requires_function_kind_and_exact_identity():
    m = TypeMatcher(QueryDescriptor("encoding/json", "NewEncoder"))
    assert m.matches_callable(Object(ObjectKind.VAR, "NewEncoder", package="encoding/json")) is False
    assert m.matches_callable(Object(ObjectKind.FUNC, "NewDecoder", package="encoding/json")) is False
    assert m.matches_callable(Object(ObjectKind.FUNC, "NewEncoder", package="example.com/json")) is False
    assert m.matches_callable(None) is False


def test_callable_bypass_ignores_selector_queries():
    m = TypeMatcher(QueryDescriptor("encoding/json", "NewEncoder", "Encode"))
    fn = Object(ObjectKind.FUNC, "NewEncoder", package="encoding/json", type=SignatureType())
    assert m.matches_callable(fn) is False
