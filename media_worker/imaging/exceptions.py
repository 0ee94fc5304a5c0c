class TranscodeError(Exception):
    """Raised when the image engine fails to convert, compress or crop a file."""
