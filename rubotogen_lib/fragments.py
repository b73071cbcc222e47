"""Java source fragments substituted into the class templates."""
import re
from typing import Dict, Iterable, List

from .api import ApiElement

INDENT = "  "

_BOXED: Dict[str, str] = {
    "boolean": "Boolean",
    "byte": "Byte",
    "char": "Character",
    "double": "Double",
    "float": "Float",
    "int": "Integer",
    "long": "Long",
    "short": "Short",
}

_DEFAULTS: Dict[str, str] = {
    "boolean": "false",
    "byte": "(byte) 0",
    "char": "(char) 0",
    "double": "0.0",
    "float": "0.0f",
    "int": "0",
    "long": "0L",
    "short": "(short) 0",
}

_GENERIC_ARGS = re.compile(r"<.*>")


def constant_names(methods: Iterable[ApiElement]) -> List[str]:
    """Distinct dispatch constants in first-seen order; overloads share one."""
    names: List[str] = []
    for m in methods:
        if m.constant_name not in names:
            names.append(m.constant_name)
    return names


def constant_declarations(names: List[str]) -> str:
    return "\n".join(f"{INDENT}public static final int {name} = {i};" for i, name in enumerate(names))


def _parameter_list(element: ApiElement) -> str:
    return ", ".join(f"{p.type} {p.name}" for p in element.parameters)


def _argument_list(element: ApiElement) -> str:
    return ", ".join(p.name for p in element.parameters)


def constructor_definition(constructor: ApiElement, class_name: str) -> str:
    return (
        f"{INDENT}public {class_name}({_parameter_list(constructor)}) {{\n"
        f"{INDENT * 2}super({_argument_list(constructor)});\n"
        f"{INDENT}}}"
    )


def _class_literal(type_name: str) -> str:
    return _BOXED.get(type_name, _GENERIC_ARGS.sub("", type_name))


def method_definition(method: ApiElement, is_interface: bool = False) -> str:
    """Override that hands the call to the Ruby block registered for the method.

    Without a registered block the call falls through to ``super`` or, for interface and
    abstract methods, to the Java default value for the return type.
    """
    args = _argument_list(method)
    call_args = f"new Object[]{{{args}}}"
    proc = f"callbackProcs[{method.constant_name}]"
    returns = method.return_type != "void"
    has_super = not is_interface and not method.abstract

    lines = [
        f"{INDENT}{method.visibility} {method.return_type} {method.name}({_parameter_list(method)}) {{",
        f"{INDENT * 2}if (callbackProcs != null && {proc} != null) {{",
    ]
    if returns:
        literal = _class_literal(method.return_type)
        lines.append(
            f"{INDENT * 3}return ({literal}) JRubyAdapter.runRubyMethod({literal}.class, {proc}, \"call\", {call_args});"
        )
    else:
        lines.append(f"{INDENT * 3}JRubyAdapter.runRubyMethod({proc}, \"call\", {call_args});")

    if has_super:
        lines.append(f"{INDENT * 2}}} else {{")
        lines.append(f"{INDENT * 3}{'return ' if returns else ''}super.{method.name}({args});")
        lines.append(f"{INDENT * 2}}}")
    elif returns:
        lines.append(f"{INDENT * 2}}} else {{")
        lines.append(f"{INDENT * 3}return {_DEFAULTS.get(method.return_type, 'null')};")
        lines.append(f"{INDENT * 2}}}")
    else:
        lines.append(f"{INDENT * 2}}}")
    lines.append(f"{INDENT}}}")
    return "\n".join(lines)
