"""Test configuration and fixtures for cl_image_converter.

This module provides:
- Pytest configuration (markers, codec capability checks)
- Synthetic image fixtures built with Pillow (JPEG, PNG with alpha, HEIC)
- Pipeline fixtures with an isolated display URL registry
"""

from io import BytesIO

import pytest
from PIL import Image, ImageDraw, features

from cl_image_converter.common.config import ConverterConfig
from cl_image_converter.common.display_urls import DisplayUrlRegistry
from cl_image_converter.common.schemas import RawFile
from cl_image_converter.pipeline import ConversionPipeline

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_runtest_setup(item: pytest.Item):
    """Skip codec-dependent tests when the installed Pillow lacks the codec."""
    if item.get_closest_marker("requires_avif") and not features.check("avif"):
        pytest.skip("Pillow was built without AVIF support")


# ============================================================================
# Helpers
# ============================================================================


def make_grid_image(width: int, height: int, mode: str = "RGB") -> Image.Image:
    """Gradient-free test card: flat background, white grid, a filled circle."""
    background = (73, 109, 137, 255) if mode == "RGBA" else (73, 109, 137)
    img = Image.new(mode, (width, height), color=background)
    draw = ImageDraw.Draw(img)

    step = max(width // 16, 8)
    for i in range(0, width, step):
        draw.line([(i, 0), (i, height)], fill="white", width=2)
    for i in range(0, height, step):
        draw.line([(0, i), (width, i)], fill="white", width=2)

    draw.ellipse(
        [width * 3 // 8, height // 3, width * 5 // 8, height * 2 // 3],
        fill=(200, 100, 100),
    )
    return img


def encode(img: Image.Image, format: str, **kwargs: object) -> bytes:
    buffer = BytesIO()
    img.save(buffer, format=format, **kwargs)
    return buffer.getvalue()


# ============================================================================
# Image Fixtures
# ============================================================================


@pytest.fixture
def synthetic_jpeg() -> RawFile:
    """800x600 JPEG."""
    data = encode(make_grid_image(800, 600), "JPEG", quality=85)
    return RawFile(name="synthetic.jpg", mime_type="image/jpeg", data=data)


@pytest.fixture
def large_jpeg() -> RawFile:
    """4000x3000 camera-sized JPEG."""
    data = encode(make_grid_image(4000, 3000), "JPEG", quality=90)
    return RawFile(name="camera_photo.JPG", mime_type="image/jpeg", data=data)


@pytest.fixture
def rgba_png() -> RawFile:
    """200x100 PNG with a translucent background."""
    img = make_grid_image(200, 100, mode="RGBA")
    img.putalpha(128)
    return RawFile(name="overlay.png", mime_type="image/png", data=encode(img, "PNG"))


@pytest.fixture
def heic_file() -> RawFile:
    """640x480 HEIC written with pillow-heif; skips when libheif cannot encode."""
    import pillow_heif

    pillow_heif.register_heif_opener()
    try:
        data = encode(make_grid_image(640, 480), "HEIF", quality=90)
    except Exception as exc:
        pytest.skip(f"libheif cannot encode HEIC here: {exc}")
    return RawFile(name="IMG_0042.HEIC", mime_type="image/heic", data=data)


@pytest.fixture
def corrupt_jpeg() -> RawFile:
    return RawFile(name="broken.jpg", mime_type="image/jpeg", data=b"\xff\xd8\xff\xe0not a jpeg")


# ============================================================================
# Pipeline Fixtures
# ============================================================================


@pytest.fixture
def url_registry() -> DisplayUrlRegistry:
    return DisplayUrlRegistry()


@pytest.fixture
def pipeline(url_registry: DisplayUrlRegistry) -> ConversionPipeline:
    return ConversionPipeline(config=ConverterConfig(), urls=url_registry)
