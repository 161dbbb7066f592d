import os
from typing import Callable, TypeAlias

import pytest

DataDirFixture: TypeAlias = str


@pytest.fixture
def data_dir() -> DataDirFixture:
    return os.path.join(os.path.dirname(__file__), "data")


DataPathFixture: TypeAlias = Callable[[str], str]


@pytest.fixture
def data_path(data_dir: DataDirFixture) -> DataPathFixture:
    def factory(path: str):
        return os.path.join(data_dir, path)

    return factory
