"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from mathbridge import BridgeSettings, LocalRuntime, TypeRegistry, build_namespace


@pytest.fixture
def registry():
    """Fresh TypeRegistry, isolated from the process-wide one."""
    return TypeRegistry()


@pytest.fixture
def settings():
    return BridgeSettings(representations=["f32", "f64"], out_arg_order="trailing")


@pytest.fixture
def runtime(registry, settings):
    """LocalRuntime over a fresh registry."""
    return LocalRuntime(registry=registry, settings=settings)


@pytest.fixture
def namespace(runtime):
    return build_namespace(runtime)


@pytest.fixture
def vec2(namespace):
    """Type handle for Vector2<f32>."""
    return namespace["Vector2"]("f32")


@pytest.fixture
def vec3(namespace):
    """Type handle for Vector3<f64>."""
    return namespace["Vector3"]("f64")
