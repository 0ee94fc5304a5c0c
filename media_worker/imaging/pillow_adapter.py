from pathlib import Path

from PIL import Image, ImageOps

from media_worker.imaging.base import (
    FULL_MAX_EDGE,
    FULL_QUALITY,
    THUMB_QUALITY,
    THUMB_SIZE,
    BaseImageTransformer,
)
from media_worker.imaging.exceptions import TranscodeError


def _as_rgb(img: Image.Image) -> Image.Image:
    if img.mode in ("RGB", "L"):
        return img
    return img.convert("RGB")


class PillowAdapter(BaseImageTransformer):
    """Transcodes images in-process with Pillow."""

    def to_jpeg(self, source: Path) -> Path:
        destination = source.with_suffix(".jpg")
        try:
            with Image.open(source) as img:
                img.load()
                exif = img.getexif()
                extra = {"exif": exif} if exif else {}
                _as_rgb(img).save(destination, format="JPEG", **extra)
        except Exception as exc:
            raise TranscodeError(f"pillow jpeg conversion failed: {exc}") from exc
        return destination

    def compress(self, path: Path) -> None:
        try:
            with Image.open(path) as img:
                img.load()
                oriented = ImageOps.exif_transpose(img)
            oriented.thumbnail((FULL_MAX_EDGE, FULL_MAX_EDGE), Image.Resampling.LANCZOS)
            _as_rgb(oriented).save(path, format="JPEG", quality=FULL_QUALITY, optimize=True)
        except Exception as exc:
            raise TranscodeError(f"pillow compression failed: {exc}") from exc

    def thumbnail(self, source: Path, destination: Path) -> None:
        try:
            with Image.open(source) as img:
                img.load()
                oriented = ImageOps.exif_transpose(img)
            cropped = ImageOps.fit(
                oriented,
                (THUMB_SIZE, THUMB_SIZE),
                method=Image.Resampling.LANCZOS,
                centering=(0.5, 0.5),
            )
            _as_rgb(cropped).save(destination, format="JPEG", quality=THUMB_QUALITY)
        except Exception as exc:
            raise TranscodeError(f"pillow thumbnail failed: {exc}") from exc
