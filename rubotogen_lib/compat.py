"""
API level compatibility checks for the types and methods that get generated.

A generated file has to compile and behave the same on every API level between the
project's minimum and target SDK. Types are checked as a whole; method lists are pruned
in three steps:

1. scope pruning: methods that do not matter anywhere in [min, target] are dropped silently
2. methods removed at or before the target are dropped with a diagnostic
3. methods that appear or become deprecated inside the range are conflicts; unless
   ``force`` is set any conflict aborts the generation
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

from .api import ApiElement
from .errors import MethodConflictError, RemovedError, VersionUnavailableError

logger = logging.getLogger(__name__)


class Reason(Enum):
    ADDED_AFTER_TARGET = "added-after-target"
    DEPRECATED_BEFORE_MIN = "deprecated-before-min"
    REMOVED_BEFORE_MIN = "removed-before-min"
    REMOVED_BEFORE_TARGET = "removed-before-target"
    ADDED_AFTER_MIN = "added-after-min"
    DEPRECATED_BEFORE_TARGET = "deprecated-before-target"


@dataclass(frozen=True)
class Exclusion:
    method: ApiElement
    reason: Reason
    version: int

    @property
    def message(self) -> str:
        sig = self.method.signature
        if self.reason in (Reason.REMOVED_BEFORE_TARGET, Reason.REMOVED_BEFORE_MIN):
            return f"Can't create {sig} -- removed in {self.version}"
        if self.reason == Reason.ADDED_AFTER_MIN:
            return f"Can't create {sig} -- added in {self.version} -- exclude or force"
        if self.reason == Reason.DEPRECATED_BEFORE_TARGET:
            return f"Can't create {sig} -- deprecated in {self.version} -- exclude or force"
        return f"Skipping {sig} -- {self.reason.value} ({self.version})"


@dataclass
class MethodSelection:
    methods: List[ApiElement] = field(default_factory=list)
    pruned: List[Exclusion] = field(default_factory=list)
    removed: List[Exclusion] = field(default_factory=list)
    conflicts: List[Exclusion] = field(default_factory=list)

    @property
    def messages(self) -> List[str]:
        return [e.message for e in self.removed + self.conflicts]


def _validate_range(min_sdk: int, target_sdk: int) -> None:
    if min_sdk > target_sdk:
        raise ValueError(f"minSdkVersion {min_sdk} is greater than targetSdkVersion {target_sdk}")


def _scope_exclusion(method: ApiElement, min_sdk: int, target_sdk: int) -> Optional[Exclusion]:
    if method.api_added is not None and method.api_added > target_sdk:
        return Exclusion(method, Reason.ADDED_AFTER_TARGET, method.api_added)
    if method.deprecated is not None and method.deprecated <= min_sdk:
        return Exclusion(method, Reason.DEPRECATED_BEFORE_MIN, method.deprecated)
    if method.api_removed is not None and method.api_removed <= min_sdk:
        return Exclusion(method, Reason.REMOVED_BEFORE_MIN, method.api_removed)
    return None


def _range_conflict(method: ApiElement, min_sdk: int, target_sdk: int) -> Optional[Exclusion]:
    if method.api_added is not None and method.api_added > min_sdk:
        return Exclusion(method, Reason.ADDED_AFTER_MIN, method.api_added)
    if method.deprecated is not None and method.deprecated <= target_sdk:
        return Exclusion(method, Reason.DEPRECATED_BEFORE_TARGET, method.deprecated)
    return None


def select_methods(methods: Iterable[ApiElement], min_sdk: int, target_sdk: int, force: bool = False) -> MethodSelection:
    """Partition ``methods`` without aborting; conflicts are reported in the result."""
    _validate_range(min_sdk, target_sdk)
    selection = MethodSelection()

    in_scope: List[ApiElement] = []
    for m in methods:
        excluded = _scope_exclusion(m, min_sdk, target_sdk)
        if excluded:
            selection.pruned.append(excluded)
        else:
            in_scope.append(m)

    present: List[ApiElement] = []
    for m in in_scope:
        if m.api_removed is not None and m.api_removed <= target_sdk:
            excluded = Exclusion(m, Reason.REMOVED_BEFORE_TARGET, m.api_removed)
            logger.warning(excluded.message)
            selection.removed.append(excluded)
        else:
            present.append(m)

    if force:
        selection.methods = present
        return selection

    for m in present:
        conflict = _range_conflict(m, min_sdk, target_sdk)
        if conflict:
            logger.warning(conflict.message)
            selection.conflicts.append(conflict)
        else:
            selection.methods.append(m)
    return selection


def check_methods(methods: Iterable[ApiElement], min_sdk: int, target_sdk: int, force: bool = False) -> List[ApiElement]:
    """Return the methods that can be generated, aborting on conflicts unless forced."""
    selection = select_methods(methods, min_sdk, target_sdk, force)
    if selection.conflicts:
        raise MethodConflictError(selection.conflicts)
    return selection.methods


def check_element(element: ApiElement, min_sdk: int, target_sdk: int, force: bool = False) -> ApiElement:
    """Make sure a class or interface exists on every API level in range."""
    _validate_range(min_sdk, target_sdk)
    if not force:
        if element.api_added is not None and element.api_added > min_sdk:
            raise VersionUnavailableError(
                f"{element.name} not available in minSdkVersion, added in {element.api_added}; use --force to create it"
            )
        if element.deprecated is not None and element.deprecated <= target_sdk:
            raise VersionUnavailableError(
                f"{element.name} deprecated for targetSdkVersion, deprecated in {element.deprecated}; use --force to create it"
            )
    if element.api_removed is not None and element.api_removed <= target_sdk:
        raise RemovedError(f"{element.name} removed for targetSdkVersion, removed in {element.api_removed}")
    return element
