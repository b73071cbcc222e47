"""
Project settings shared by every generation call.

Values come from a ``rubotogen.yaml`` file, from the project's ``AndroidManifest.xml``,
or from both (manifest values win over file values, explicit overrides win over both).
"""
import os
import xml.etree.ElementTree as ET
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError

ANDROID_NS = "{http://schemas.android.com/apk/res/android}"

DEFAULT_PACKAGE = "org.ruboto"
DEFAULT_CONFIG_FILE = "rubotogen.yaml"
DEFAULT_API_FILE = "api.yaml"
UNSPECIFIED_SDK = 1


@dataclass(frozen=True)
class GeneratorConfig:
    min_sdk: int
    target_sdk: int
    package: str = DEFAULT_PACKAGE
    api_path: str = DEFAULT_API_FILE
    destination: str = "."

    def __post_init__(self) -> None:
        if self.min_sdk > self.target_sdk:
            raise ConfigError(f"minSdkVersion {self.min_sdk} is greater than targetSdkVersion {self.target_sdk}")
        if not self.package:
            raise ConfigError("A default package is required")

    def override(self, **values: Any) -> "GeneratorConfig":
        """Copy with every non-None keyword applied."""
        return replace(self, **{k: v for k, v in values.items() if v is not None})


def _sdk(value: Any, key: str, source: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{source}: {key} must be an integer API level, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{source}: {key} must be an integer API level, got {value!r}") from None


def _from_values(values: Dict[str, Any], source: str, require_sdk: bool = True) -> GeneratorConfig:
    if values.get("min_sdk") is None:
        if not require_sdk:
            values = dict(values, min_sdk=UNSPECIFIED_SDK)
        else:
            raise ConfigError(f"{source}: min_sdk is required")

    min_sdk = _sdk(values["min_sdk"], "min_sdk", source)
    target = values.get("target_sdk")
    target_sdk = min_sdk if target is None else _sdk(target, "target_sdk", source)
    return GeneratorConfig(
        min_sdk=min_sdk,
        target_sdk=target_sdk,
        package=values.get("package") or DEFAULT_PACKAGE,
        api_path=values.get("api") or DEFAULT_API_FILE,
        destination=values.get("destination") or ".",
    )


def read_config_file(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Cannot parse {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping")
    # Relative descriptor paths are resolved against the config file
    api = data.get("api")
    if api and not os.path.isabs(api):
        data["api"] = os.path.join(os.path.dirname(os.path.abspath(path)), api)
    return data


def read_manifest(path: str) -> Dict[str, Any]:
    """Extract package, minSdkVersion and targetSdkVersion from an AndroidManifest.xml."""
    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as e:
        raise ConfigError(f"Cannot parse {path}: {e}") from e
    values: Dict[str, Any] = {}
    if root.get("package"):
        values["package"] = root.get("package")
    uses_sdk = root.find("uses-sdk")
    if uses_sdk is not None:
        if uses_sdk.get(f"{ANDROID_NS}minSdkVersion"):
            values["min_sdk"] = uses_sdk.get(f"{ANDROID_NS}minSdkVersion")
        if uses_sdk.get(f"{ANDROID_NS}targetSdkVersion"):
            values["target_sdk"] = uses_sdk.get(f"{ANDROID_NS}targetSdkVersion")
    return values


def load_config(
    path: Optional[str] = None,
    manifest: Optional[str] = None,
    require_sdk: bool = True,
    **overrides: Any,
) -> GeneratorConfig:
    """Merge the config file, the manifest and explicit overrides, in that order.

    With ``require_sdk=False`` a missing min_sdk falls back to API level 1, for callers
    such as the script-backed class generation that never filter by API level.
    """
    values: Dict[str, Any] = {}
    sources = []
    if path:
        values.update(read_config_file(path))
        sources.append(path)
    if manifest:
        values.update(read_manifest(manifest))
        sources.append(manifest)
    values.update({k: v for k, v in overrides.items() if v is not None})
    return _from_values(values, " + ".join(sources) or "settings", require_sdk)


def config_from_manifest(path: str, **overrides: Any) -> GeneratorConfig:
    return load_config(manifest=path, **overrides)
