import io

import pdfplumber

from yachtscan.pdf.base import BaseTextLayerReader
from yachtscan.pdf.exceptions import PdfTextLayerError


class PdfPlumberTextLayerReader(BaseTextLayerReader):
    """Text layer reader backed by pdfplumber."""

    def read(self, pdf_bytes: bytes) -> str:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages[: self._max_pages]]
        except Exception as exc:
            raise PdfTextLayerError(f"pdfplumber could not read text layer: {exc}") from exc
        return self._join_pages(pages)
