from typing import List, Optional


class GenerationError(Exception):
    """Base class for everything that aborts a generation unit."""


class DescriptorError(GenerationError):
    pass


class ClassNotFoundError(GenerationError):
    def __init__(self, name: str) -> None:
        super().__init__(f"{name} not found")
        self.name = name


class VersionUnavailableError(GenerationError):
    pass


class RemovedError(GenerationError):
    pass


class MethodConflictError(GenerationError):
    """Raised when methods change inside the min/target range and force is off.

    ``conflicts`` holds the Exclusion records that caused the abort.
    """

    def __init__(self, conflicts: List, message: Optional[str] = None) -> None:
        super().__init__(message or f"Aborting! {len(conflicts)} method(s) change between min and target SDK")
        self.conflicts = list(conflicts)


class TemplateMissingError(GenerationError):
    pass


class ConfigError(GenerationError):
    pass
