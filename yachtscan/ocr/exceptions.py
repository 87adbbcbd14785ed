from yachtscan.extraction.exceptions import ExtractionError


class OcrError(ExtractionError):
    """Raised when the document-understanding service returns no usable result."""


class OcrNetworkError(OcrError):
    """Raised on transport failures: unreachable host, timeout, non-2xx status."""
