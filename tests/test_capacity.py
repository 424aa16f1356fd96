"""
Capacity planner tests (capacity.py).

Tests:
1-3.   Orientation mapping — flat, vertical, ordering invariants
4-7.   Fit test — oversized height, oversized footprint, exact fit, degenerate sizes
8-12.  Grid packing — 27-object reference case, positions order, spacing 0,
       z-spacing policy, invariants across sizes
13-15. Print time — packed bed, single object, non-fitting object
"""

import pytest

from printcalc.capacity import CapacityPlanner, arrangement_label, orient_dimensions
from printcalc.config import EngineConfig
from printcalc.profiles import MACHINES
from printcalc.schemas import (
    Dimensions,
    MachineProfile,
    Orientation,
    Position,
    ZSpacingPolicy,
)


def _dims(w, d, h):
    return Dimensions(width=w, depth=d, height=h)


PRINTER_400 = MACHINES["400"]
PRINTER_600 = MACHINES["600"]


# ============================================================
# 1-3. Orientation mapping
# ============================================================

def test_flat_orientation_puts_smallest_on_z():
    oriented = orient_dimensions(_dims(50, 100, 80), Orientation.FLAT)
    assert oriented.as_tuple() == (100, 80, 50)


def test_vertical_orientation_puts_largest_on_z():
    oriented = orient_dimensions(_dims(50, 100, 80), Orientation.VERTICAL)
    assert oriented.as_tuple() == (50, 80, 100)


@pytest.mark.parametrize("raw", [
    (1, 2, 3), (3, 2, 1), (2, 3, 1), (7.5, 7.5, 0.2), (120, 4, 60),
])
def test_orientation_ordering_invariants(raw):
    flat = orient_dimensions(_dims(*raw), Orientation.FLAT)
    vertical = orient_dimensions(_dims(*raw), Orientation.VERTICAL)
    assert flat.height <= flat.depth <= flat.width
    assert vertical.height >= vertical.depth >= vertical.width
    assert sorted(flat.as_tuple()) == sorted(raw)


def test_orientation_accepts_string_value():
    assert orient_dimensions(_dims(1, 2, 3), "vertical").height == 3


# ============================================================
# 4-7. Fit test
# ============================================================

def test_too_tall_never_fits():
    """Height 250 on a 200 mm bed → no fit, whatever the footprint."""
    planner = CapacityPlanner()
    result = planner.plan(_dims(10, 10, 250), Orientation.VERTICAL, PRINTER_400)
    assert result.fits is False
    assert result.total_objects == 0
    assert result.positions == []
    assert (result.count_x, result.count_y, result.count_z) == (0, 0, 0)
    assert result.arrangement == "0 × 0 × 0"
    assert result.object_dimensions.height == 250


def test_footprint_margin_is_applied():
    """380 mm wide exceeds 390 - 2×10 on the 400, fits the 600."""
    planner = CapacityPlanner()
    raw = _dims(380, 20, 10)
    assert planner.plan(raw, Orientation.FLAT, PRINTER_400).fits is False
    assert planner.plan(raw, Orientation.FLAT, PRINTER_600).fits is True


def test_exact_fit_is_one_object():
    """370 × 270 × 200 fills the 400's usable volume exactly (bounds inclusive)."""
    result = CapacityPlanner().plan(_dims(200, 370, 270), Orientation.FLAT, PRINTER_400)
    assert result.fits is True
    assert result.total_objects == 1
    assert result.object_dimensions.as_tuple() == (370, 270, 200)
    vertical = CapacityPlanner().plan(_dims(200, 370, 270), Orientation.VERTICAL, PRINTER_400)
    assert vertical.fits is False


def test_exact_usable_volume_fits_once():
    profile = MachineProfile(
        name="Cube bed", bed_dimensions=_dims(120, 120, 100),
        layer_time_seconds=10, wall_margin_mm=10,
    )
    result = CapacityPlanner().plan(_dims(100, 100, 100), Orientation.FLAT, profile)
    assert result.fits is True
    assert result.total_objects == 1
    assert result.positions == [Position(x=10, y=10, z=0)]


@pytest.mark.parametrize("raw", [(0, 10, 10), (-5, 10, 10), (float("nan"), 10, 10)])
def test_degenerate_dimensions_do_not_fit(raw):
    """Zero, negative or NaN sizes report fits=False instead of raising."""
    result = CapacityPlanner().plan(_dims(*raw), Orientation.FLAT, PRINTER_400, 0.0)
    assert result.fits is False
    assert result.positions == []


# ============================================================
# 8-12. Grid packing
# ============================================================

def test_reference_bed_packs_27():
    """390×290×200 bed, margin 10, spacing 15, flat 100×80×50 → 3×3×3."""
    result = CapacityPlanner().plan(_dims(50, 100, 80), Orientation.FLAT, PRINTER_400, 15)
    assert result.fits is True
    assert (result.count_x, result.count_y, result.count_z) == (3, 3, 3)
    assert result.total_objects == 27
    assert len(result.positions) == 27
    assert result.arrangement == "3 × 3 × 3"
    assert result.object_dimensions.as_tuple() == (100, 80, 50)


def test_positions_are_z_major_then_y_then_x():
    result = CapacityPlanner().plan(_dims(100, 80, 50), Orientation.FLAT, PRINTER_400, 15)
    positions = result.positions
    assert positions[0] == Position(x=10, y=10, z=0)
    assert positions[1] == Position(x=125, y=10, z=0)
    assert positions[2] == Position(x=240, y=10, z=0)
    assert positions[3] == Position(x=10, y=105, z=0)
    assert positions[9] == Position(x=10, y=10, z=65)
    assert positions[-1] == Position(x=240, y=200, z=130)


def test_default_spacing_comes_from_config():
    planner = CapacityPlanner(EngineConfig(object_spacing_mm=15))
    assert planner.plan(_dims(100, 80, 50), Orientation.FLAT, PRINTER_400).total_objects == 27


def test_zero_spacing_packs_tight():
    """50 mm cubes, no gaps: floor(370/50)=7, floor(270/50)=5, floor(200/50)=4."""
    result = CapacityPlanner().plan(_dims(50, 50, 50), Orientation.FLAT, PRINTER_400, 0)
    assert (result.count_x, result.count_y, result.count_z) == (7, 5, 4)
    assert result.total_objects == 140
    assert result.positions[1].x == 60


def test_z_spacing_policy_omit():
    """Legacy policy drops spacing on Z: floor(200 / 50) = 4 layers of objects."""
    include = CapacityPlanner(EngineConfig(z_spacing_policy=ZSpacingPolicy.INCLUDE))
    omit = CapacityPlanner(EngineConfig(z_spacing_policy=ZSpacingPolicy.OMIT))
    raw = _dims(100, 80, 50)
    assert include.plan(raw, Orientation.FLAT, PRINTER_400, 15).count_z == 3
    result = omit.plan(raw, Orientation.FLAT, PRINTER_400, 15)
    assert result.count_z == 4
    assert result.total_objects == 36
    assert len(result.positions) == 36
    assert [p.z for p in result.positions[::9]] == [0, 50, 100, 150]
    assert result.positions[-1].z + 50 <= PRINTER_400.bed_dimensions.height


@pytest.mark.parametrize("raw,orientation,machine", [
    ((100, 80, 50), Orientation.FLAT, "400"),
    ((100, 80, 50), Orientation.VERTICAL, "400"),
    ((12.5, 33.3, 7.1), Orientation.FLAT, "600"),
    ((150, 150, 150), Orientation.VERTICAL, "600"),
    ((360, 10, 190), Orientation.VERTICAL, "400"),
])
def test_packing_invariants(raw, orientation, machine):
    """counts multiply to total; every copy lies inside the usable volume."""
    profile = MACHINES[machine]
    result = CapacityPlanner().plan(_dims(*raw), orientation, profile, 15)
    if not result.fits:
        assert result.total_objects == 0 and result.positions == []
        return
    assert result.count_x * result.count_y * result.count_z == result.total_objects
    assert len(result.positions) == result.total_objects
    bed = profile.bed_dimensions
    margin = profile.wall_margin_mm
    obj = result.object_dimensions
    for p in result.positions:
        assert p.x >= margin and p.y >= margin and p.z >= 0
        assert p.x + obj.width <= bed.width - margin + 1e-9
        assert p.y + obj.depth <= bed.depth - margin + 1e-9
        assert p.z + obj.height <= bed.height + 1e-9


def test_arrangement_label():
    assert arrangement_label(4, 2, 1) == "4 × 2 × 1"


# ============================================================
# 13-15. Print time
# ============================================================

def test_packed_print_time():
    """3 layers of 50 mm at 0.5 mm slices → 300 layers × 45 s."""
    planner = CapacityPlanner(EngineConfig(layer_height_mm=0.5))
    result = planner.plan(_dims(100, 80, 50), Orientation.FLAT, PRINTER_400, 15)
    assert result.print_height_mm == 150
    assert result.print_time_seconds == 300 * 45


def test_print_time_rounds_layers_up():
    planner = CapacityPlanner(EngineConfig(layer_height_mm=0.5))
    assert planner.print_time_seconds(10.25, PRINTER_600) == 21 * 35


def test_single_object_print_time():
    planner = CapacityPlanner(EngineConfig(layer_height_mm=0.5))
    raw = _dims(100, 80, 50)
    assert planner.object_print_time(raw, Orientation.FLAT, PRINTER_400) == 100 * 45
    assert planner.object_print_time(raw, Orientation.VERTICAL, PRINTER_400) == 200 * 45
    assert planner.object_print_time(_dims(10, 10, 250), Orientation.VERTICAL, PRINTER_400) is None


def test_non_fitting_has_no_print_time():
    result = CapacityPlanner().plan(_dims(10, 10, 250), Orientation.VERTICAL, PRINTER_400)
    assert result.print_height_mm == 0
    assert result.print_time_seconds == 0
