"""
Machine capacity — how many identical objects fit on a build bed.

Objects are packed on a uniform axis-aligned grid (no rotation per copy,
no irregular packing). The footprint loses a wall margin on every side;
the build height does not.

Not fitting is a normal outcome: plan() returns fits=False with zero
counts and no positions, it never raises for that.
"""

import math

from .config import EngineConfig
from .schemas import (
    Dimensions,
    MachineProfile,
    Orientation,
    PackingResult,
    Position,
    ZSpacingPolicy,
)


def orient_dimensions(dimensions: Dimensions, orientation: Orientation) -> Dimensions:
    """
    Sort the three raw extents ascending to d0 <= d1 <= d2, then:
    flat     → width=d2, depth=d1, height=d0
    vertical → width=d0, depth=d1, height=d2
    """
    d0, d1, d2 = sorted(dimensions.as_tuple())
    if Orientation(orientation) == Orientation.VERTICAL:
        return Dimensions(width=d0, depth=d1, height=d2)
    return Dimensions(width=d2, depth=d1, height=d0)


def arrangement_label(count_x: int, count_y: int, count_z: int) -> str:
    return f"{count_x} × {count_y} × {count_z}"


class CapacityPlanner:
    """Grid packing and print-time arithmetic for one engine config."""

    def __init__(self, config: EngineConfig = None):
        self.config = config or EngineConfig()

    def available_space(self, profile: MachineProfile) -> Dimensions:
        bed = profile.bed_dimensions
        margin = profile.wall_margin_mm
        return Dimensions(
            width=bed.width - 2 * margin,
            depth=bed.depth - 2 * margin,
            height=bed.height,
        )

    def fits(self, oriented: Dimensions, profile: MachineProfile) -> bool:
        """Fit test on already-oriented dimensions."""
        if not oriented.is_positive():
            return False
        avail = self.available_space(profile)
        return (
            oriented.width <= avail.width
            and oriented.depth <= avail.depth
            and oriented.height <= avail.height
        )

    def check_fits(self, dimensions: Dimensions, orientation: Orientation,
                   profile: MachineProfile) -> bool:
        """Fit test on raw dimensions for the given orientation."""
        return self.fits(orient_dimensions(dimensions, orientation), profile)

    def grid_counts(self, oriented: Dimensions, profile: MachineProfile,
                    spacing: float) -> tuple:
        """(count_x, count_y, count_z) for an object that is known to fit."""
        avail = self.available_space(profile)
        count_x = math.floor((avail.width + spacing) / (oriented.width + spacing))
        count_y = math.floor((avail.depth + spacing) / (oriented.depth + spacing))
        z_spacing = self.z_spacing(spacing)
        count_z = math.floor((avail.height + z_spacing) / (oriented.height + z_spacing))
        return count_x, count_y, count_z

    def z_spacing(self, spacing: float) -> float:
        if self.config.z_spacing_policy == ZSpacingPolicy.OMIT:
            return 0.0
        return spacing

    def generate_positions(self, oriented: Dimensions, count_x: int, count_y: int,
                           count_z: int, wall_margin: float, spacing: float) -> list:
        """Minimum corners, z-major then y then x."""
        positions = []
        z_step = oriented.height + self.z_spacing(spacing)
        for z in range(count_z):
            z_pos = z * z_step
            for y in range(count_y):
                y_pos = wall_margin + y * (oriented.depth + spacing)
                for x in range(count_x):
                    x_pos = wall_margin + x * (oriented.width + spacing)
                    positions.append(Position(x=x_pos, y=y_pos, z=z_pos))
        return positions

    def print_time_seconds(self, print_height_mm: float, profile: MachineProfile) -> float:
        """ceil(height / layer height) layers × per-layer time."""
        layers = math.ceil(print_height_mm / self.config.layer_height_mm)
        return layers * profile.layer_time_seconds

    def object_print_time(self, dimensions: Dimensions, orientation: Orientation,
                          profile: MachineProfile):
        """
        Print time of a single copy, or None when it does not fit.
        """
        oriented = orient_dimensions(dimensions, orientation)
        if not self.fits(oriented, profile):
            return None
        return self.print_time_seconds(oriented.height, profile)

    def plan(self, raw_dimensions: Dimensions, orientation: Orientation,
             profile: MachineProfile, object_spacing_mm: float = None) -> PackingResult:
        """
        Pack copies of one object onto a machine bed.

        Args:
            raw_dimensions: extents as decoded (any axis order)
            orientation: flat or vertical
            profile: machine bed, margin and layer time
            object_spacing_mm: gap between copies on every axis
                (config default when None)

        Returns:
            PackingResult. When fits is False all counts are 0 and
            positions is empty; object_dimensions still carries the
            oriented extents so callers can explain why.
        """
        spacing = self.config.object_spacing_mm if object_spacing_mm is None else object_spacing_mm
        if not math.isfinite(spacing) or spacing < 0:
            spacing = 0.0
        oriented = orient_dimensions(raw_dimensions, orientation)

        if not self.fits(oriented, profile):
            return PackingResult(fits=False, object_dimensions=oriented)

        count_x, count_y, count_z = self.grid_counts(oriented, profile, spacing)
        positions = self.generate_positions(
            oriented, count_x, count_y, count_z, profile.wall_margin_mm, spacing,
        )
        print_height = count_z * oriented.height

        return PackingResult(
            fits=True,
            count_x=count_x,
            count_y=count_y,
            count_z=count_z,
            total_objects=count_x * count_y * count_z,
            positions=positions,
            object_dimensions=oriented,
            print_height_mm=print_height,
            print_time_seconds=self.print_time_seconds(print_height, profile),
            arrangement=arrangement_label(count_x, count_y, count_z),
        )
