"""Fixtures for image panel tests."""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest
from PIL import Image


def pytest_configure() -> None:
    # Ensure `src` is importable when running tests from the repo root.
    repo_root = Path(__file__).resolve().parents[2]
    src_dir = repo_root / "src"
    if src_dir.exists():
        sys.path.insert(0, str(src_dir))


@pytest.fixture
def landscape_png(tmp_path: Path) -> Path:
    """A 160x90 opaque RGB PNG on disk."""
    p = tmp_path / "landscape.png"
    Image.new("RGB", (160, 90), (10, 20, 30)).save(p)
    return p


@pytest.fixture
def portrait_png(tmp_path: Path) -> Path:
    """A 90x160 RGBA PNG on disk."""
    p = tmp_path / "portrait.png"
    Image.new("RGBA", (90, 160), (200, 100, 50, 128)).save(p)
    return p


@pytest.fixture
def rgba_pixels() -> np.ndarray:
    """A 3x2 (w x h) straight-alpha RGBA array."""
    return np.array(
        [
            [[255, 0, 0, 255], [200, 100, 50, 128], [10, 20, 30, 0]],
            [[255, 255, 255, 1], [0, 0, 0, 255], [129, 77, 254, 254]],
        ],
        dtype=np.uint8,
    )
