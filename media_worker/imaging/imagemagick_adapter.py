import subprocess
from pathlib import Path

from media_worker.imaging.base import (
    FULL_MAX_EDGE,
    FULL_QUALITY,
    THUMB_QUALITY,
    THUMB_SIZE,
    BaseImageTransformer,
)
from media_worker.imaging.exceptions import TranscodeError


class ImageMagickAdapter(BaseImageTransformer):
    """Transcodes images by spawning ImageMagick's mogrify and convert."""

    def __init__(self, mogrify_bin: str = "mogrify", convert_bin: str = "convert") -> None:
        self._mogrify = mogrify_bin
        self._convert = convert_bin

    def to_jpeg(self, source: Path) -> Path:
        # mogrify -format writes <stem>.jpg beside the source; [0] keeps
        # multi-frame inputs (GIF, TIFF) to a single output file
        self._run([self._mogrify, "-format", "jpg", f"{source}[0]"])
        return source.with_suffix(".jpg")

    def compress(self, path: Path) -> None:
        bound = f"{FULL_MAX_EDGE}x{FULL_MAX_EDGE}>"
        self._run(
            [
                self._mogrify,
                "-auto-orient",
                "-resize",
                bound,
                "-quality",
                str(FULL_QUALITY),
                str(path),
            ]
        )

    def thumbnail(self, source: Path, destination: Path) -> None:
        size = f"{THUMB_SIZE}x{THUMB_SIZE}"
        self._run(
            [
                self._convert,
                "-define",
                f"jpeg:size={size}",
                str(source),
                "-auto-orient",
                "-thumbnail",
                f"{size}^",
                "-quality",
                str(THUMB_QUALITY),
                "-gravity",
                "center",
                "-extent",
                size,
                str(destination),
            ]
        )

    def _run(self, args: list[str]) -> None:
        try:
            subprocess.run(args, check=True, capture_output=True, text=True)
        except subprocess.CalledProcessError as exc:
            stderr = (exc.stderr or "").strip()
            raise TranscodeError(
                f"{args[0]} exited with status {exc.returncode}: {stderr}"
            ) from exc
        except OSError as exc:
            raise TranscodeError(f"cannot run {args[0]}: {exc}") from exc
