"""Shared test fixtures for creative-audit tests."""

import io
import zipfile

import pytest

from creative_audit.bundle import Bundle
from creative_audit.config import AuditSettings


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


def _encode(files):
    return {path: data.encode("utf-8") if isinstance(data, str) else data for path, data in files.items()}


def build_bundle(files, name="creative.zip", **kwargs):
    """Bundle from a path -> str/bytes mapping."""
    return Bundle.from_files(name, _encode(files), **kwargs)


def write_zip(path, files):
    """Write a path -> str/bytes mapping as a ZIP archive at ``path``."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data in _encode(files).items():
            zf.writestr(name, data)
    path.write_bytes(buffer.getvalue())
    return path


SIMPLE_INDEX = """<!DOCTYPE html>
<html>
<head>
<meta name="ad.size" content="width=300,height=250">
<link rel="stylesheet" href="style.css">
<script src="main.js"></script>
</head>
<body>
<div id="ad"><img src="img/logo.png" alt=""></div>
</body>
</html>
"""

SIMPLE_CSS = "#ad { width: 300px; height: 250px; background: url(img/bg.png); }\n"


@pytest.fixture
def settings():
    """Default settings, both profiles."""
    return AuditSettings()


@pytest.fixture
def simple_files():
    """A clean 300x250 creative: index, stylesheet, script and two images."""
    return {
        "index.html": SIMPLE_INDEX,
        "style.css": SIMPLE_CSS,
        "main.js": "var a=1;",
        "img/logo.png": b"\x89PNG logo",
        "img/bg.png": b"\x89PNG background",
    }


@pytest.fixture
def simple_bundle(simple_files):
    return build_bundle(simple_files, name="banner_300x250.zip")


@pytest.fixture
def simple_zip(tmp_path, simple_files):
    return write_zip(tmp_path / "banner_300x250.zip", simple_files)


@pytest.fixture
def make_bundle():
    """Factory fixture: ``make_bundle({"index.html": "..."}, name=...)``."""
    return build_bundle


@pytest.fixture
def make_zip(tmp_path):
    """Factory fixture: ``make_zip("name.zip", {...})`` writes under tmp_path."""

    def _make(name, files):
        return write_zip(tmp_path / name, files)

    return _make


@pytest.fixture
def make_context(settings):
    """Factory fixture building a CheckContext through the engine's own stages."""
    from creative_audit.engine import AuditEngine

    def _make(bundle, runtime=None, settings_override=None):
        engine = AuditEngine(settings_override or settings)
        result = engine.analyze(bundle)
        return engine.build_context(bundle, result, runtime)

    return _make
