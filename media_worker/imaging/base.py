from abc import ABC, abstractmethod
from pathlib import Path

from PIL import Image

from media_worker.imaging.exceptions import TranscodeError
from media_worker.imaging.models import PhotoDimensions

FULL_MAX_EDGE = 1800
FULL_QUALITY = 75
THUMB_SIZE = 500
THUMB_QUALITY = 90


class BaseImageTransformer(ABC):
    """Contract for all image engine adapters.

    Every operation works on local files and raises TranscodeError on any
    engine failure.
    """

    @abstractmethod
    def to_jpeg(self, source: Path) -> Path:
        """Convert a non-JPEG image to JPEG.

        Returns:
            Path of the JPEG file (``source`` with a ``.jpg`` suffix).
        """

    @abstractmethod
    def compress(self, path: Path) -> None:
        """Auto-orient, bound the longest edge to FULL_MAX_EDGE, re-encode at FULL_QUALITY, in place."""

    @abstractmethod
    def thumbnail(self, source: Path, destination: Path) -> None:
        """Write an auto-oriented, center-cropped THUMB_SIZE square to ``destination``."""

    def dimensions(self, path: Path) -> PhotoDimensions:
        """Read the pixel size of an image file."""
        try:
            with Image.open(path) as img:
                width, height = img.size
        except Exception as exc:
            raise TranscodeError(f"cannot read image size of {path.name}: {exc}") from exc
        return PhotoDimensions(width=width, height=height)
