"""Named dimension presets offered next to the width/height fields."""

from typing import Final

from .schemas import DimensionPreset

DIMENSION_PRESETS: Final[tuple[DimensionPreset, ...]] = (
    DimensionPreset(name="4K", width=3840, height=2160, description="Ultra HD"),
    DimensionPreset(name="1080p", width=1920, height=1080, description="Full HD"),
    DimensionPreset(name="720p", width=1280, height=720, description="HD Ready"),
    DimensionPreset(name="Instagram", width=1080, height=1080, description="Square"),
    DimensionPreset(name="Web", width=800, height=600, description="Standard"),
)


def get_preset(name: str) -> DimensionPreset:
    """Look up a preset by name, case-insensitively.

    Raises:
        KeyError: If no preset has that name
    """
    wanted = name.strip().lower()
    for preset in DIMENSION_PRESETS:
        if preset.name.lower() == wanted:
            return preset
    raise KeyError(f"Unknown dimension preset: {name}")
