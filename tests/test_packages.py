"""
Tests for package namespaces.
"""
import importlib
from types import ModuleType

import pytest


@pytest.mark.parametrize("name", ["wardrobe_api.routers", "wardrobe_api.dependencies", "wardrobe_api.utils"])
def test_namespace_packages_export_nothing(name):
    """Should keep routers, dependencies and utils as plain namespaces"""
    package = importlib.import_module(name)
    public = [
        attr for attr, value in vars(package).items()
        if not attr.startswith("_") and not isinstance(value, ModuleType)
    ]
    assert public == []
    assert package.__doc__
