import logging
import os
from typing import Iterable, Mapping, Optional, Sequence, Tuple, Union

from .errors import TemplateMissingError

logger = logging.getLogger(__name__)

ASSETS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "assets")

Substitutions = Union[Mapping[str, str], Sequence[Tuple[str, str]]]


class TemplateStore:
    """Read-only lookup of Java templates (``src/<id>.java``) and sample scripts (``samples/``)."""

    def __init__(self, root: Optional[str] = None) -> None:
        self.root = root or ASSETS_DIR

    def _read(self, *parts: str) -> str:
        path = os.path.join(self.root, *parts)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            raise TemplateMissingError(f"Template not found: {path}") from None

    def source(self, template_id: str, ext: str = "java") -> str:
        return self._read("src", f"{template_id}.{ext}")

    def sample(self, name: str) -> str:
        return self._read("samples", name)


def _pairs(substitutions: Substitutions) -> Iterable[Tuple[str, str]]:
    if isinstance(substitutions, Mapping):
        return substitutions.items()
    return substitutions


def render(text: str, substitutions: Substitutions) -> str:
    """Replace every occurrence of each token, one token at a time, in the given order.

    Replacement is literal; there is no escaping and no templating language.
    """
    for token, value in _pairs(substitutions):
        text = text.replace(token, value)
    return text


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def package_dir(dest: str, package: str) -> str:
    return os.path.join(dest, "src", *package.split("."))


def build_file(
    store: TemplateStore,
    template_id: str,
    package: str,
    name: str,
    substitutions: Substitutions,
    dest: str = ".",
    ext: str = "java",
) -> str:
    """Render ``template_id`` and write it to ``<dest>/src/<package path>/<name>.<ext>``."""
    text = render(store.source(template_id, ext), substitutions)
    to = package_dir(dest, package)
    ensure_dir(to)
    path = os.path.join(to, f"{name}.{ext}")
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
    logger.info(f"Wrote {path}")
    return path
