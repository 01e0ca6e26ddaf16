from __future__ import annotations

import io
import logging
import re
from pathlib import PurePath

from pypdf import PdfReader

from .errors import ExtractionFailed, UnsupportedFileType

logger = logging.getLogger("textextraction.service")

TEXT_SUFFIXES = (".txt", ".md")
PDF_SUFFIX = ".pdf"

_PRINTABLE = re.compile(rb"[\x20-\x7e]+")


def _printable_scan(raw: bytes) -> str:
    """Last-resort recovery of readable ASCII runs from an unparseable PDF."""
    return " ".join(m.decode("ascii") for m in _PRINTABLE.findall(raw)).strip()


class TextExtractor:
    """Turns raw file bytes into plain text, dispatching on the file suffix."""

    def extract(self, filename: str, raw: bytes) -> str:
        suffix = PurePath(filename).suffix.lower()

        if suffix in TEXT_SUFFIXES:
            text = raw.decode("utf-8", errors="replace")
            if not text:
                raise ExtractionFailed(f"no text in file: {filename}")
            return text

        if suffix == PDF_SUFFIX:
            text = self._extract_pdf(filename, raw)
            if not text:
                raise ExtractionFailed(f"could not extract text from PDF: {filename}")
            return text

        raise UnsupportedFileType(f"unsupported file type: {filename}")

    def _extract_pdf(self, filename: str, raw: bytes) -> str:
        try:
            reader = PdfReader(io.BytesIO(raw))
            pages = [(page.extract_text() or "").strip() for page in reader.pages]
            text = "\n".join(p for p in pages if p).strip()
        except Exception as e:
            logger.warning("pdf_parse_failed filename=%s error=%s; scanning raw bytes", filename, e)
            text = ""
        if not text:
            text = _printable_scan(raw)
        return text
