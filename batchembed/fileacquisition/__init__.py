from .errors import AcquisitionError, DownloadFailed, SourceNotFound
from .service import FileFetcher, filename_from_url

__all__ = ["AcquisitionError", "DownloadFailed", "SourceNotFound", "FileFetcher", "filename_from_url"]
