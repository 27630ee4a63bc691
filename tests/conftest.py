"""Shared test fixtures for framecompose tests."""

import pytest
import yaml


TEST_COLORS = {
    "text": (255, 255, 255),
    "text_secondary": (230, 230, 230),
    "accent": (255, 221, 111),
    "highlight": (115, 193, 189),
    "card": (21, 95, 108),
}

TEST_GRADIENTS = {
    "primary": ((21, 95, 108), (54, 93, 131)),
    "success": ((137, 151, 93), (21, 95, 108)),
    "dark": ((26, 26, 46), (21, 95, 108)),
}


@pytest.fixture
def colors():
    return dict(TEST_COLORS)


@pytest.fixture
def gradients():
    return dict(TEST_GRADIENTS)


@pytest.fixture
def video_settings():
    """Small output so scene rendering stays fast."""
    return {"resolution": (160, 90), "fps": 30, "background": (26, 26, 46)}


def small_manifest(**overrides) -> dict:
    """Three-scene manifest at 160x90: 30 + 30 + 30 frames, two 6-frame fades."""
    m = {
        "video": {
            "fps": 30,
            "resolution": [160, 90],
            "duration": 78,
            "transition": 6,
        },
        "scenes": [
            {"id": "intro", "kind": "title", "frames": 30, "title": "Hello"},
            {"id": "list", "kind": "list", "frames": 30, "title": "Items",
             "items": ["one", "two"]},
            {"id": "typing", "kind": "typewriter", "frames": 30, "text": "typed"},
        ],
    }
    m.update(overrides)
    return m


@pytest.fixture
def write_manifest(tmp_path):
    """Write a manifest dict to a YAML file under tmp_path, return its path."""
    def _write(content: dict, name: str = "timeline.yaml") -> str:
        path = tmp_path / name
        with open(path, "w") as f:
            yaml.dump(content, f)
        return str(path)
    return _write
