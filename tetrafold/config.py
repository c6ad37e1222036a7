"""
Configuration for a fold lattice board.

Defines the playable bounds and the numeric tolerances used when applying
and verifying folds.
"""

from dataclasses import dataclass
import json
from pathlib import Path

from .geometry import BoundingBox


@dataclass
class BoardConfig:
    """
    Configuration for a board session.

    Attributes:
        bounds: Playable rectangle as (min_x, min_y, max_x, max_y), in cells
        area_tolerance: Areas below this count as zero (overlap, containment)
        snap_tolerance: Max distance a coordinate is moved when snapping to the lattice
    """
    # Playable area
    bounds: tuple[float, float, float, float] = (0, 0, 16, 16)

    # Tolerances
    area_tolerance: float = 0.01
    snap_tolerance: float = 0.01

    def validate(self) -> list[str]:
        """
        Validate configuration values.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []

        if len(self.bounds) != 4:
            errors.append(f"bounds must have 4 values, got {len(self.bounds)}")
        else:
            min_x, min_y, max_x, max_y = self.bounds
            if max_x <= min_x or max_y <= min_y:
                errors.append(f"bounds must have positive width and height, got {self.bounds}")
            if not all(float(v).is_integer() for v in self.bounds):
                errors.append(f"bounds must lie on cell corners, got {self.bounds}")

        if self.area_tolerance <= 0:
            errors.append(f"area_tolerance must be positive, got {self.area_tolerance}")

        if not 0 <= self.snap_tolerance < 0.25:
            errors.append(f"snap_tolerance must be in [0, 0.25), got {self.snap_tolerance}")

        return errors

    @property
    def bounding_box(self) -> BoundingBox:
        """Playable bounds as a BoundingBox."""
        return BoundingBox(*self.bounds)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "bounds": list(self.bounds),
            "area_tolerance": self.area_tolerance,
            "snap_tolerance": self.snap_tolerance,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "BoardConfig":
        """Create from dictionary."""
        return cls(
            bounds=tuple(data.get("bounds", (0, 0, 16, 16))),
            area_tolerance=data.get("area_tolerance", 0.01),
            snap_tolerance=data.get("snap_tolerance", 0.01),
        )

    @classmethod
    def square(cls, size: int | str) -> "BoardConfig":
        """Square board anchored at the origin; size may be a preset name."""
        if isinstance(size, str):
            size = BOARD_SIZE_PRESETS[size]
        return cls(bounds=(0, 0, size, size))

    def save(self, filepath: Path | str) -> None:
        """Save configuration to JSON file."""
        filepath = Path(filepath)
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath: Path | str) -> "BoardConfig":
        """Load configuration from JSON file."""
        filepath = Path(filepath)
        if not filepath.exists():
            return cls()  # Return defaults if file doesn't exist

        with open(filepath, 'r') as f:
            data = json.load(f)
        return cls.from_dict(data)


# Common board sizes (square, in cells)
BOARD_SIZE_PRESETS = {
    "small": 8,
    "medium": 16,
    "large": 32,
}
