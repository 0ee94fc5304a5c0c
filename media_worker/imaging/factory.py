from media_worker.config.settings import Settings
from media_worker.imaging.base import BaseImageTransformer
from media_worker.imaging.imagemagick_adapter import ImageMagickAdapter
from media_worker.imaging.pillow_adapter import PillowAdapter


class ImageTransformerFactory:
    """Creates the correct image engine adapter based on settings."""

    ENGINES = ("imagemagick", "pillow")

    @classmethod
    def create(cls, settings: Settings) -> BaseImageTransformer:
        engine = settings.image_engine.lower()
        if engine == "imagemagick":
            return ImageMagickAdapter(
                mogrify_bin=settings.imagemagick_mogrify_bin,
                convert_bin=settings.imagemagick_convert_bin,
            )
        if engine == "pillow":
            return PillowAdapter()
        raise ValueError(
            f"Unknown image engine '{engine}'. Choose from: {list(cls.ENGINES)}"
        )
