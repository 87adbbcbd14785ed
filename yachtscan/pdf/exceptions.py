class PdfTextLayerError(Exception):
    """Raised when the embedded text layer of a PDF cannot be read."""
