from .errors import ExtractionError, ExtractionFailed, UnsupportedFileType
from .service import TextExtractor

__all__ = ["ExtractionError", "ExtractionFailed", "UnsupportedFileType", "TextExtractor"]
