from .errors import ResultNotFound, StorageError
from .local_fs import LocalResultStore, result_filename

__all__ = ["ResultNotFound", "StorageError", "LocalResultStore", "result_filename"]
