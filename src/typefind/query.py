from dataclasses import dataclass


class MalformedQueryError(ValueError):
    """Raised when a query string lacks the `<pkg>.<name>` shape."""


@dataclass(frozen=True)
class QueryDescriptor:
    """
    Fully qualified search target.

    *   `package_path`: import path of the declaring package (e.g. `encoding/json`).
    *   `object_name`: type or function name inside that package (e.g. `Encoder`).
    *   `selector_name`: optional field/method of `object_name`; empty means
        "match the object itself".
    """

    package_path: str
    object_name: str
    selector_name: str = ""

    @property
    def has_selector(self) -> bool:
        return self.selector_name != ""

    def __str__(self) -> str:
        text = f"{self.package_path}.{self.object_name}"
        if self.selector_name:
            text += f".{self.selector_name}"
        return text


def parse_query(target: str) -> QueryDescriptor:
    """
    Parses `<package-path>.<objectName>[.<selectorName>]`.

    Only the last `/` segment carries the dotted names, so package paths with
    dots in earlier segments (`golang.org/x/tools/go/loader.Config`) survive:

        paths = ["golang.org", "x", "tools", "go", "loader.Config"]
        names = ["loader", "Config"]
        -> package "golang.org/x/tools/go/loader", object "Config"

    Raises:
        MalformedQueryError: fewer than two dot-segments or an empty object name.
    """
    paths = target.split("/")
    names = paths[-1].split(".")

    if len(names) < 2 or not names[1]:
        raise MalformedQueryError(f"Query '{target}' must look like <pkg>.<name>[.<sel>]")

    package_path = "/".join(paths[:-1] + [names[0]])
    selector_name = names[2] if len(names) > 2 else ""

    return QueryDescriptor(package_path=package_path, object_name=names[1], selector_name=selector_name)
