from pathlib import Path

import pytest
from PIL import Image


@pytest.fixture()
def landscape_png(tmp_path: Path) -> Path:
    """A 2400x1200 RGBA PNG, wider than the compression bound."""
    path = tmp_path / "landscape.png"
    Image.new("RGBA", (2400, 1200), (200, 40, 40, 255)).save(path, format="PNG")
    return path


@pytest.fixture()
def portrait_jpeg(tmp_path: Path) -> Path:
    """A 600x900 JPEG, already inside the compression bound."""
    path = tmp_path / "portrait.jpg"
    Image.new("RGB", (600, 900), (40, 200, 40)).save(path, format="JPEG")
    return path


@pytest.fixture()
def rotated_jpeg(tmp_path: Path) -> Path:
    """A 400x200 JPEG whose EXIF orientation asks for a 90 degree rotation."""
    path = tmp_path / "rotated.jpg"
    img = Image.new("RGB", (400, 200), (40, 40, 200))
    exif = img.getexif()
    exif[0x0112] = 6
    img.save(path, format="JPEG", exif=exif)
    return path
