"""Shared test fixtures for the rubotogen test suite."""

import sys
from pathlib import Path

import pytest

# Ensure rubotogen_lib is importable
sys.path.insert(0, str(Path(__file__).parent.parent))

from rubotogen_lib.api import ApiDescriptor, ApiElement, Parameter, load_api
from rubotogen_lib.config import GeneratorConfig
from rubotogen_lib.templates import TemplateStore

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir():
    """Path to test fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def api_path():
    return FIXTURES_DIR / "api.yaml"


@pytest.fixture
def api(api_path):
    """The trimmed-down platform descriptor."""
    return load_api(str(api_path))


@pytest.fixture
def config(tmp_path):
    """minSdkVersion 10, targetSdkVersion 19, writing into a temporary project."""
    return GeneratorConfig(min_sdk=10, target_sdk=19, package="org.ruboto", destination=str(tmp_path))


@pytest.fixture
def store():
    return TemplateStore()


@pytest.fixture
def make_method():
    """Factory for method records with lifecycle attributes."""

    def _make(name, added=None, deprecated=None, removed=None, params=(), **kwargs):
        return ApiElement(
            name=name,
            kind="method",
            api_added=added,
            deprecated=deprecated,
            api_removed=removed,
            parameters=tuple(Parameter(type=t, name=f"arg{i}") for i, t in enumerate(params)),
            **kwargs,
        )

    return _make


@pytest.fixture
def overloaded_api():
    """A class whose onEvent overloads share one dispatch constant."""
    return ApiDescriptor.from_dict({
        "api": [{
            "name": "com.example.Widget",
            "kind": "class",
            "api_added": 1,
            "constructors": [{"parameters": []}],
            "methods": [
                {"name": "onEvent", "parameters": [{"type": "int", "name": "code"}]},
                {"name": "onEvent", "parameters": [{"type": "java.lang.String", "name": "label"}]},
                {"name": "onStop"},
            ],
        }]
    })
