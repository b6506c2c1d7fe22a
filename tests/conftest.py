from pathlib import Path

import pytest

from repub.models.book import BookMetadata
from repub.models.config import BuildConfig


@pytest.fixture
def out_dir(tmp_path: Path) -> Path:
    path = tmp_path / "out"
    path.mkdir()
    return path


@pytest.fixture
def src_dir(tmp_path: Path) -> Path:
    path = tmp_path / "src"
    path.mkdir()
    return path


@pytest.fixture
def make_config(out_dir: Path):
    def _make(source: Path, **kwargs) -> BuildConfig:
        metadata = kwargs.pop(
            "metadata", BookMetadata(title="Book", creator="Alice", language="en")
        )
        return BuildConfig(source=source, metadata=metadata, output_dir=out_dir, **kwargs)

    return _make
