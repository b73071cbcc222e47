"""
Read-only access to the API descriptor document.

The descriptor is a YAML file with a top-level ``api`` list. Every entry describes one
class or interface of the platform together with its constructors and methods:

    api:
      - name: android.app.Activity
        kind: class
        extends: android.view.ContextThemeWrapper
        api_added: 1
        constructors:
          - parameters: []
        methods:
          - name: onCreate
            visibility: protected
            parameters:
              - {type: android.os.Bundle, name: savedInstanceState}

Lifecycle attributes (``api_added``, ``deprecated``, ``api_removed``) are validated into
optional integers when the document is loaded, so the rest of the generator never has to
second-guess their type.
"""
import logging
import re
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple, Union

import yaml

from .errors import ClassNotFoundError, DescriptorError

logger = logging.getLogger(__name__)

TYPE_KINDS = ("class", "interface")
METHOD_BASES = ("all", "none", "abstract", "on")
LIFECYCLE_KEYS = ("api_added", "deprecated", "api_removed")

_ON_METHOD = re.compile(r"^on[A-Z]")
_CAPITAL = re.compile(r"([A-Z])")


@dataclass(frozen=True)
class Parameter:
    type: str
    name: str


@dataclass(frozen=True)
class ApiElement:
    name: str
    kind: str
    api_added: Optional[int] = None
    deprecated: Optional[int] = None
    api_removed: Optional[int] = None
    # Method and constructor facts
    return_type: str = "void"
    parameters: Tuple[Parameter, ...] = ()
    visibility: str = "public"
    abstract: bool = False
    final: bool = False
    static: bool = False
    # Class and interface facts
    extends: Optional[str] = None
    implements: Tuple[str, ...] = ()
    constructors: Tuple["ApiElement", ...] = ()
    methods: Tuple["ApiElement", ...] = ()

    @property
    def simple_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]

    @property
    def is_class(self) -> bool:
        return self.kind == "class"

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(p.type for p in self.parameters)})"

    @property
    def constant_name(self) -> str:
        """Dispatch constant shared by every overload of this method name.

        onCreate -> CB_CREATE, dispatchKeyEvent -> CB_DISPATCH_KEY_EVENT
        """
        words = _CAPITAL.sub(r"_\1", self.name).upper()
        if words.startswith("ON_"):
            words = words[3:]
        return "CB_" + words


def _sealed(element: ApiElement) -> Set[str]:
    """Signatures a subclass may not override."""
    return {m.signature for m in element.methods if m.final or m.static}


def split_names(value: Union[None, str, Iterable[str]]) -> List[str]:
    """Accept "a,b" strings as well as iterables; drop blanks, keep order."""
    if value is None:
        return []
    items = value.split(",") if isinstance(value, str) else list(value)
    result: List[str] = []
    for item in items:
        item = str(item).strip()
        if item and item not in result:
            result.append(item)
    return result


def _lifecycle(raw: Mapping[str, Any], key: str, owner: str) -> Optional[int]:
    value = raw.get(key)
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise DescriptorError(f"{owner}: {key} must be an integer API level, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise DescriptorError(f"{owner}: {key} must be an integer API level, got {value!r}") from None


def _flag(raw: Mapping[str, Any], key: str) -> bool:
    value = raw.get(key, False)
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


def _parse_parameters(raw: Any, owner: str) -> Tuple[Parameter, ...]:
    if not raw:
        return ()
    if not isinstance(raw, list):
        raise DescriptorError(f"{owner}: parameters must be a list")
    params: List[Parameter] = []
    for i, p in enumerate(raw):
        if isinstance(p, str):
            params.append(Parameter(type=p, name=f"arg{i}"))
        elif isinstance(p, dict) and p.get("type"):
            params.append(Parameter(type=str(p["type"]), name=str(p.get("name") or f"arg{i}")))
        else:
            raise DescriptorError(f"{owner}: parameter {i} needs a type")
    return tuple(params)


def _parse_member(raw: Any, kind: str, owner: str) -> ApiElement:
    if not isinstance(raw, dict):
        raise DescriptorError(f"{owner}: {kind} entries must be mappings")
    if kind == "constructor":
        name = owner.rsplit(".", 1)[-1]
    else:
        name = raw.get("name")
        if not name:
            raise DescriptorError(f"{owner}: method without a name")
    where = f"{owner}.{name}"
    return ApiElement(
        name=str(name),
        kind=kind,
        api_added=_lifecycle(raw, "api_added", where),
        deprecated=_lifecycle(raw, "deprecated", where),
        api_removed=_lifecycle(raw, "api_removed", where),
        return_type=str(raw.get("return") or "void"),
        parameters=_parse_parameters(raw.get("parameters"), where),
        visibility=str(raw.get("visibility") or "public"),
        abstract=_flag(raw, "abstract"),
        final=_flag(raw, "final"),
        static=_flag(raw, "static"),
    )


def _parse_type(raw: Any, index: int) -> ApiElement:
    if not isinstance(raw, dict) or not raw.get("name"):
        raise DescriptorError(f"api entry {index} has no name")
    name = str(raw["name"])
    kind = raw.get("kind", "class")
    if kind not in TYPE_KINDS:
        raise DescriptorError(f"{name}: kind must be one of {', '.join(TYPE_KINDS)}, got {kind!r}")
    return ApiElement(
        name=name,
        kind=kind,
        api_added=_lifecycle(raw, "api_added", name),
        deprecated=_lifecycle(raw, "deprecated", name),
        api_removed=_lifecycle(raw, "api_removed", name),
        final=_flag(raw, "final"),
        extends=raw.get("extends") or None,
        implements=tuple(split_names(raw.get("implements"))),
        constructors=tuple(_parse_member(c, "constructor", name) for c in raw.get("constructors") or []),
        methods=tuple(_parse_member(m, "method", name) for m in raw.get("methods") or []),
    )


class ApiDescriptor:
    """Queryable set of class and interface records."""

    def __init__(self, elements: Iterable[ApiElement]) -> None:
        self.elements: List[ApiElement] = list(elements)
        self._by_name: Dict[str, ApiElement] = {}
        self._by_simple_name: Dict[str, List[ApiElement]] = {}
        for e in self.elements:
            if e.name in self._by_name:
                raise DescriptorError(f"{e.name} is described twice")
            self._by_name[e.name] = e
            self._by_simple_name.setdefault(e.simple_name, []).append(e)

    @classmethod
    def from_dict(cls, data: Any) -> "ApiDescriptor":
        entries = data.get("api") if isinstance(data, dict) else None
        if not isinstance(entries, list):
            raise DescriptorError("API descriptor must contain a top-level 'api' list")
        return cls(_parse_type(raw, i) for i, raw in enumerate(entries))

    def find_class_or_interface(self, name: str, kind: str = "either") -> Optional[ApiElement]:
        """Look up a type by exact name, or by simple name when that is unambiguous."""
        element = self._by_name.get(name)
        if element is None:
            candidates = self._by_simple_name.get(name, [])
            if len(candidates) == 1:
                element = candidates[0]
        if element is None:
            return None
        if kind != "either" and element.kind != kind:
            return None
        return element

    def find_class(self, name: str) -> Optional[ApiElement]:
        return self.find_class_or_interface(name, "class")

    def find_interface(self, name: str) -> Optional[ApiElement]:
        return self.find_class_or_interface(name, "interface")

    def all_methods(
        self,
        element: ApiElement,
        method_base: str = "all",
        method_include: Union[None, str, Iterable[str]] = None,
        method_exclude: Union[None, str, Iterable[str]] = None,
        implements: Union[None, str, Iterable[str]] = None,
    ) -> List[ApiElement]:
        """Collect the overridable methods of ``element``.

        The base group picks the starting set from the declared methods, ``method_include``
        adds declared methods by name and ``method_exclude`` removes them. Final and static
        methods are never overridable, and they also hide the same signature further up the
        ``extends`` chain. Methods inherited through ``extends`` follow the same rules;
        interfaces (declared ones and the extra ``implements`` names) contribute all of their
        methods, marked abstract. Signatures already collected are never added twice.
        """
        if method_base not in METHOD_BASES:
            raise DescriptorError(f"Unknown method base {method_base!r}; use one of {', '.join(METHOD_BASES)}")
        include = split_names(method_include)
        exclude = split_names(method_exclude)

        working = self._own_methods(element, method_base, include, exclude)
        seen = {m.signature for m in working} | _sealed(element)

        def merge(methods: Iterable[ApiElement]) -> None:
            for m in methods:
                if m.signature not in seen:
                    seen.add(m.signature)
                    working.append(m)

        visited = {element.name}
        parent_name = element.extends
        while parent_name and element.is_class:
            parent = self.find_class(parent_name)
            if parent is None or parent.name in visited:
                logger.debug(f"Stopping inheritance walk of {element.name} at {parent_name}")
                break
            visited.add(parent.name)
            seen.update(_sealed(parent))
            merge(self._own_methods(parent, method_base, include, exclude))
            for name in parent.implements:
                merge(self._interface_methods(name, visited, required=False))
            parent_name = parent.extends

        inherited = list(element.implements)
        if not element.is_class:
            inherited = split_names(element.extends) + inherited
        for name in inherited:
            merge(self._interface_methods(name, visited, required=False))
        for name in split_names(implements):
            merge(self._interface_methods(name, visited, required=True))

        return working

    def _own_methods(self, element: ApiElement, base: str, include: List[str], exclude: List[str]) -> List[ApiElement]:
        declared = list(element.methods)
        if base == "all":
            working = list(declared)
        elif base == "abstract":
            working = [m for m in declared if m.abstract]
        elif base == "on":
            working = [m for m in declared if _ON_METHOD.match(m.name)]
        else:
            working = []
        for m in declared:
            if m.name in include and m not in working:
                working.append(m)
        return [m for m in working if m.name not in exclude and not m.final and not m.static]

    def _interface_methods(self, name: str, visited: set, required: bool) -> List[ApiElement]:
        interface = self.find_interface(name)
        if interface is None:
            if required:
                raise ClassNotFoundError(name)
            logger.debug(f"Interface {name} is not in the descriptor; skipping its methods")
            return []
        if interface.name in visited:
            return []
        visited.add(interface.name)
        # Interface methods have no body to fall back to
        methods = [replace(m, abstract=True) for m in interface.methods if not m.static]
        for parent in split_names(interface.extends) + list(interface.implements):
            methods.extend(self._interface_methods(parent, visited, required=False))
        return methods


def load_api(path: str) -> ApiDescriptor:
    """Load and validate an API descriptor YAML file."""
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise DescriptorError(f"Cannot parse API descriptor {path}: {e}") from e
    descriptor = ApiDescriptor.from_dict(data)
    logger.info(f"Loaded {len(descriptor.elements)} types from {path}")
    return descriptor
