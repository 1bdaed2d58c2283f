from __future__ import annotations

import os
import pathlib
from typing import TYPE_CHECKING

import pytest
from hypothesis import HealthCheck, Verbosity, settings

from npyarray import config
from npyarray.dtype import ElementType, data_type_registry

if TYPE_CHECKING:
    from collections.abc import Generator
    from typing import Any


@pytest.fixture(params=[str, pathlib.Path])
def path_type(request: pytest.FixtureRequest) -> Any:
    return request.param


@pytest.fixture
def npy_path(tmp_path: pathlib.Path, path_type: Any) -> Any:
    return path_type(tmp_path / "data.npy")


@pytest.fixture(params=list(data_type_registry), ids=lambda cls: cls.tag.value)
def element_type(request: pytest.FixtureRequest) -> ElementType[Any, Any]:
    return request.param()


@pytest.fixture(autouse=True)
def reset_config() -> Generator[None, None, None]:
    config.reset()
    yield
    config.reset()


settings.register_profile(
    "default",
    parent=settings.get_profile("default"),
    max_examples=300,
    suppress_health_check=[HealthCheck.filter_too_much, HealthCheck.too_slow],
    deadline=None,
    verbosity=Verbosity.verbose,
)
settings.register_profile(
    "ci",
    max_examples=300,
    derandomize=True,  # more like regression testing
    deadline=None,
    suppress_health_check=[HealthCheck.filter_too_much, HealthCheck.too_slow],
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "default"))
