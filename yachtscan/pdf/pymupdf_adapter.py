import pymupdf

from yachtscan.pdf.base import BaseTextLayerReader
from yachtscan.pdf.exceptions import PdfTextLayerError


class PyMuPdfTextLayerReader(BaseTextLayerReader):
    """Text layer reader backed by PyMuPDF."""

    def read(self, pdf_bytes: bytes) -> str:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                pages = [
                    doc[index].get_text()
                    for index in range(min(doc.page_count, self._max_pages))
                ]
        except Exception as exc:
            raise PdfTextLayerError(f"pymupdf could not read text layer: {exc}") from exc
        return self._join_pages(pages)
