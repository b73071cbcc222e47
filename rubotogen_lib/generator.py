import logging
import os
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple, Union

from .api import ApiDescriptor, ApiElement, split_names
from .compat import check_element, check_methods
from .config import GeneratorConfig
from .errors import ClassNotFoundError, GenerationError
from .fragments import constant_declarations, constant_names, constructor_definition, method_definition
from .templates import TemplateStore, ensure_dir, build_file, package_dir, render

logger = logging.getLogger(__name__)

Names = Union[None, str, Iterable[str]]

CALLBACK_PACKAGE = "org.ruboto.callbacks"
CORE_PACKAGE = "org.ruboto"

LISTENER_INTERFACES = (
    "android.view.View.OnClickListener",
    "android.widget.AdapterView.OnItemClickListener",
)
LIFECYCLE_CLASSES = (
    "android.app.Activity",
    "android.app.Service",
    "android.content.BroadcastReceiver",
    "android.view.View",
)
# Only generated when asked for by name, never as part of "all"
OPTIONAL_ACTIVITIES = (
    "android.preference.PreferenceActivity",
    "android.app.TabActivity",
)
# Lifecycle hooks are wired by the Ruby side, not generated as overridable stubs
LIFECYCLE_HOOKS = ("onCreate", "onReceive")

INHERITING_KINDS = ("Activity", "Service", "BroadcastReceiver")


@dataclass
class GenerationParams:
    name: str
    klass: Optional[str] = None
    interface: Optional[str] = None
    package: Optional[str] = None
    template: str = "InheritingClass"
    method_base: str = "all"
    method_include: List[str] = field(default_factory=list)
    method_exclude: List[str] = field(default_factory=list)
    implements: List[str] = field(default_factory=list)
    force: bool = False

    def __post_init__(self) -> None:
        if bool(self.klass) == bool(self.interface):
            raise ValueError("Exactly one of klass or interface must be given")
        if not self.name:
            raise ValueError("A name for the generated type is required")
        self.method_include = split_names(self.method_include)
        self.method_exclude = split_names(self.method_exclude)
        self.implements = split_names(self.implements)

    @property
    def target(self) -> str:
        return self.klass or self.interface  # type: ignore[return-value]


def get_class_or_interface(api: ApiDescriptor, name: str, config: GeneratorConfig, force: bool = False) -> ApiElement:
    element = api.find_class_or_interface(name)
    if element is None:
        raise ClassNotFoundError(name)
    return check_element(element, config.min_sdk, config.target_sdk, force)


def _inheritance(element: ApiElement, implements: List[str]) -> Tuple[str, str]:
    """Return the THE_ACTION keyword and the THE_ANDROID_CLASS clause."""
    if element.is_class:
        clause = element.name
        if implements:
            clause += " implements " + ", ".join(implements)
        return "extends", clause
    return "implements", ", ".join([element.name] + implements)


def generate_subclass_or_interface(
    api: ApiDescriptor,
    config: GeneratorConfig,
    params: GenerationParams,
    store: Optional[TemplateStore] = None,
    dest: Optional[str] = None,
) -> str:
    """Generate one Java class extending a platform class or implementing an interface.

    Every check runs before anything is written, so a failed generation leaves no file.
    Returns the path of the written file.
    """
    store = store or TemplateStore()
    package = params.package or config.package

    element = get_class_or_interface(api, params.target, config, params.force)

    logger.info(f"Generating methods for {params.name}...")
    methods = api.all_methods(
        element, params.method_base, params.method_include, params.method_exclude, params.implements
    )
    methods = check_methods(methods, config.min_sdk, config.target_sdk, params.force)
    logger.info(f"Done. Methods created: {len(methods)}")

    constants = constant_names(methods)
    action, android_class = _inheritance(element, params.implements)
    constructors = ""
    if element.is_class:
        constructors = "\n\n".join(constructor_definition(c, params.name) for c in element.constructors)

    substitutions = [
        ("THE_PACKAGE", package),
        ("THE_ACTION", action),
        ("THE_ANDROID_CLASS", android_class),
        ("THE_RUBOTO_CLASS", params.name),
        ("THE_CONSTANTS", constant_declarations(constants)),
        ("CONSTANTS_COUNT", str(len(constants))),
        ("THE_CONSTRUCTORS", constructors),
        ("THE_METHODS", "\n\n".join(method_definition(m, not element.is_class) for m in methods)),
    ]
    return build_file(store, params.template, package, params.name, substitutions, dest or config.destination)


@dataclass
class BatchResult:
    written: List[str] = field(default_factory=list)
    errors: List[Tuple[str, GenerationError]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _simple_name(qualified: str) -> str:
    return qualified.split(".")[-1]


def core_class_requests(
    selection: str = "all",
    method_base: str = "all",
    method_include: Names = None,
    method_exclude: Names = None,
    implements: Names = None,
    force: bool = False,
) -> List[GenerationParams]:
    """Expand a selection ("all" or a simple class name) into generation requests."""
    requests: List[GenerationParams] = []
    for i in LISTENER_INTERFACES:
        name = _simple_name(i)
        if selection in (name, "all"):
            requests.append(GenerationParams(name=f"Ruboto{name}", interface=i, package=CALLBACK_PACKAGE))

    exclude = split_names(split_names(method_exclude) + list(LIFECYCLE_HOOKS))
    shared = dict(
        package=CORE_PACKAGE,
        method_base=method_base,
        method_include=split_names(method_include),
        method_exclude=exclude,
        implements=split_names(implements),
        force=force,
    )
    for i in LIFECYCLE_CLASSES:
        name = _simple_name(i)
        if selection in (name, "all"):
            template = "InheritingClass" if name == "View" else f"Ruboto{name}"
            requests.append(GenerationParams(name=f"Ruboto{name}", klass=i, template=template, **shared))

    for i in OPTIONAL_ACTIVITIES:
        name = _simple_name(i)
        if selection == name:
            requests.append(GenerationParams(name=f"Ruboto{name}", klass=i, template="RubotoActivity", **shared))
    return requests


def generate_core_classes(
    api: ApiDescriptor,
    config: GeneratorConfig,
    selection: str = "all",
    method_base: str = "all",
    method_include: Names = None,
    method_exclude: Names = None,
    implements: Names = None,
    force: bool = False,
    halt_on_error: bool = True,
    store: Optional[TemplateStore] = None,
    dest: Optional[str] = None,
) -> BatchResult:
    """Generate RubotoActivity, RubotoService, the listener callbacks, etc.

    Entries run in catalog order. By default the first failure propagates and stops the
    batch; with ``halt_on_error=False`` failures are collected and the batch carries on.
    """
    requests = core_class_requests(selection, method_base, method_include, method_exclude, implements, force)
    if not requests:
        raise GenerationError(f"Unknown core class {selection!r}")

    result = BatchResult()
    for params in requests:
        try:
            result.written.append(generate_subclass_or_interface(api, config, params, store, dest))
        except GenerationError as e:
            if halt_on_error:
                raise
            logger.error(f"{params.name}: {e}")
            result.errors.append((params.name, e))
    return result


def underscore(name: str) -> str:
    """BroadcastReceiver -> broadcast_receiver"""
    return re.sub(r"(?<!^)([A-Z])", r"_\1", name).lower()


def _append(path: str, text: str) -> None:
    ensure_dir(os.path.dirname(path))
    with open(path, "a", encoding="utf-8") as f:
        f.write(text)


def generate_inheriting_file(
    kind: str,
    name: str,
    package: str,
    script_name: str,
    dest: str = ".",
    filename: Optional[str] = None,
    store: Optional[TemplateStore] = None,
) -> List[str]:
    """Write a script-backed Activity, Service or BroadcastReceiver plus its sample script and test.

    The sample script and test are appended, so generating a second class for the same
    script name adds to it rather than replacing it.
    """
    if kind not in INHERITING_KINDS:
        raise GenerationError(f"Cannot generate an inheriting {kind}; use one of {', '.join(INHERITING_KINDS)}")
    store = store or TemplateStore()
    sample_id = underscore(kind)

    java = render(
        store.source(f"Inheriting{kind}"),
        [("THE_PACKAGE", package), (f"Inheriting{kind}", name), ("start.rb", script_name)],
    )
    sample = render(
        store.sample(f"sample_{sample_id}.rb"),
        [("THE_PACKAGE", package), (f"Sample{kind}", name), ("start.rb", script_name)],
    )
    sample_test = render(
        store.sample(f"sample_{sample_id}_test.rb"),
        [("THE_PACKAGE", package), (f"Sample{kind}", name)],
    )

    to = package_dir(dest, package)
    ensure_dir(to)
    java_path = os.path.join(to, f"{filename or name}.java")
    with open(java_path, "w", encoding="utf-8") as f:
        f.write(java)

    script_path = os.path.join(dest, "assets", "scripts", script_name)
    test_name = (script_name[:-3] if script_name.endswith(".rb") else script_name) + "_test.rb"
    test_path = os.path.join(dest, "test", "assets", "scripts", test_name)
    _append(script_path, sample)
    _append(test_path, sample_test)
    logger.info(f"Wrote {java_path}, {script_path} and {test_path}")
    return [java_path, script_path, test_path]
