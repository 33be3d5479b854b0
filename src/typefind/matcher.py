from typing import Optional

from .query import QueryDescriptor
from .semantic.model import NamedType, Object, ObjectKind, Type, strip_pointers


class TypeMatcher:
    """
    Single point of truth deciding whether a resolved type satisfies the query.

    Every plane scanner goes through `matches`; the only other entry point is
    `matches_callable`, used by the Use Scanner for function/method names.
    """

    def __init__(self, query: QueryDescriptor):
        self.query = query

    def matches(self, typ: Optional[Type], selector: str = "") -> bool:
        """
        Returns True when `typ` (after pointer stripping) is the query's named type
        and `selector` is exactly the query's selector.
        """
        if selector != self.query.selector_name:
            return False

        typ = strip_pointers(typ)
        if not isinstance(typ, NamedType):
            return False

        # TODO: universe types (e.g. `error`) have no package; expose them under a pseudo-package
        if typ.package is None:
            return False

        return typ.package == self.query.package_path and typ.name == self.query.object_name

    def matches_callable(self, obj: Optional[Object]) -> bool:
        """
        Name-based match for functions.

        A query like `encoding/json.NewEncoder` targets the function itself, whose
        type is a signature rather than a named type, so identity is checked on
        the declaring package and name instead.
        """
        if obj is None or obj.kind is not ObjectKind.FUNC:
            return False
        if self.query.has_selector:
            return False
        return obj.package == self.query.package_path and obj.name == self.query.object_name
