from dataclasses import dataclass


@dataclass(frozen=True)
class PhotoDimensions:
    """Pixel size of a transcoded image."""

    width: int
    height: int
