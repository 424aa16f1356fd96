"""
Shared test fixtures — test client and binary STL builders.
"""

import os

import pytest
from fastapi.testclient import TestClient

# Keep decodes on threads and logs quiet before importing app modules
os.environ.setdefault("PRINTCALC_DECODE_EXECUTOR", "thread")
os.environ.setdefault("PRINTCALC_LOG_LEVEL", "WARNING")

from printcalc.main import app
from tests.stl_builders import box_triangles, pack_stl


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def make_box():
    """Builder: make_box(w, d, h, origin=..., reverse=...) → STL bytes."""
    def _make(width, depth, height, origin=(0.0, 0.0, 0.0), reverse=False):
        return pack_stl(box_triangles(width, depth, height, origin, reverse))
    return _make


@pytest.fixture
def make_mesh():
    """Builder: make_mesh(triangles, header=...) → STL bytes."""
    return pack_stl


@pytest.fixture
def cube_10mm(make_box):
    """10 mm cube → 1.0 cm³."""
    return make_box(10, 10, 10)
