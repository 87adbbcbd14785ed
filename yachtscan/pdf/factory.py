from yachtscan.config.settings import Settings
from yachtscan.pdf.base import BaseTextLayerReader
from yachtscan.pdf.pdfplumber_adapter import PdfPlumberTextLayerReader
from yachtscan.pdf.pymupdf_adapter import PyMuPdfTextLayerReader


class TextLayerReaderFactory:
    """Picks the PDF text layer reader named by ``pdf_engine``."""

    READERS: dict[str, type[BaseTextLayerReader]] = {
        "pdfplumber": PdfPlumberTextLayerReader,
        "pymupdf": PyMuPdfTextLayerReader,
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseTextLayerReader | None:
        if not settings.pdf_text_layer_enabled:
            return None
        engine = settings.pdf_engine.lower()
        reader_cls = cls.READERS.get(engine)
        if reader_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.READERS)}"
            )
        return reader_cls()
