"""
rubotogen_lib: generate Java glue classes that let Ruby scripts subclass Android framework
classes and implement framework interfaces.

Public API:
- load_api(path) -> ApiDescriptor
- load_config(path=None, manifest=None, **overrides) -> GeneratorConfig
- check_methods(methods, min_sdk, target_sdk, force=False) -> list[ApiElement]
- select_methods(methods, min_sdk, target_sdk, force=False) -> MethodSelection
- render(text, substitutions) -> str
- generate_subclass_or_interface(api, config, params, store=None, dest=None) -> str
- generate_core_classes(api, config, selection="all", ...) -> BatchResult
- generate_inheriting_file(kind, name, package, script_name, dest=".", ...) -> list[str]

The generator:
- Looks the requested class or interface up in a YAML API descriptor.
- Collects the overridable methods (base group, include and exclude lists, extra interfaces).
- Drops or rejects methods that do not exist on every API level between minSdkVersion and
  targetSdkVersion; --force accepts methods that change inside that range.
- Fills the THE_* placeholders of a Java template and writes src/<package>/<Name>.java.
"""
from .api import ApiDescriptor, ApiElement, Parameter, load_api
from .compat import MethodSelection, check_element, check_methods, select_methods
from .config import GeneratorConfig, config_from_manifest, load_config
from .errors import (
    ClassNotFoundError,
    ConfigError,
    DescriptorError,
    GenerationError,
    MethodConflictError,
    RemovedError,
    TemplateMissingError,
    VersionUnavailableError,
)
from .generator import (
    BatchResult,
    GenerationParams,
    generate_core_classes,
    generate_inheriting_file,
    generate_subclass_or_interface,
)
from .templates import TemplateStore, build_file, render

__all__ = [
    "ApiDescriptor",
    "ApiElement",
    "Parameter",
    "load_api",
    "MethodSelection",
    "check_element",
    "check_methods",
    "select_methods",
    "GeneratorConfig",
    "config_from_manifest",
    "load_config",
    "ClassNotFoundError",
    "ConfigError",
    "DescriptorError",
    "GenerationError",
    "MethodConflictError",
    "RemovedError",
    "TemplateMissingError",
    "VersionUnavailableError",
    "BatchResult",
    "GenerationParams",
    "generate_core_classes",
    "generate_inheriting_file",
    "generate_subclass_or_interface",
    "TemplateStore",
    "build_file",
    "render",
]
