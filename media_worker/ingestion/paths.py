from dataclasses import dataclass
from pathlib import PurePosixPath

from media_worker.ingestion.exceptions import MalformedKeyError

COMPRESSED_PREFIX = "full_"
THUMB_PREFIX = "thumb_"
JPEG_EXTENSION = ".jpg"

# <x>/<x>/<report_id>/<field_id>/<attachment_id>/<file>
_MIN_DIRECTORY_SEGMENTS = 5


@dataclass(frozen=True)
class ObjectIdentity:
    """Identifiers and name parts decoded from an attachment object key."""

    key: str
    directory: str
    file_name: str
    extension: str
    stem: str
    report_id: str
    field_id: str
    attachment_id: str


@dataclass(frozen=True)
class DerivedPaths:
    """Keys of the compressed and thumbnail outputs of an image upload."""

    full_name: str
    thumb_name: str
    full_key: str
    thumb_key: str


def decode_key(key: str) -> ObjectIdentity:
    """Split an object key into directory, name parts and report identifiers.

    Raises:
        MalformedKeyError: if the directory holds fewer than 5 segments.
    """
    path = PurePosixPath(key)
    directory = str(path.parent)
    segments = directory.split("/") if directory != "." else []
    if len(segments) < _MIN_DIRECTORY_SEGMENTS:
        raise MalformedKeyError(
            f"key '{key}' has {len(segments)} directory segments, "
            f"expected at least {_MIN_DIRECTORY_SEGMENTS}"
        )
    return ObjectIdentity(
        key=key,
        directory=directory,
        file_name=path.name,
        extension=path.suffix,
        stem=path.stem,
        report_id=segments[2],
        field_id=segments[3],
        attachment_id=segments[4],
    )


def derive_paths(identity: ObjectIdentity) -> DerivedPaths:
    """Build output keys next to the original: full_<stem>.jpg and thumb_<stem>.jpg."""
    full_name = f"{COMPRESSED_PREFIX}{identity.stem}{JPEG_EXTENSION}"
    thumb_name = f"{THUMB_PREFIX}{identity.stem}{JPEG_EXTENSION}"
    return DerivedPaths(
        full_name=full_name,
        thumb_name=thumb_name,
        full_key=f"{identity.directory}/{full_name}",
        thumb_key=f"{identity.directory}/{thumb_name}",
    )
