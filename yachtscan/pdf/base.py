from abc import ABC, abstractmethod


class BaseTextLayerReader(ABC):
    """Reads the embedded text layer of a certificate PDF.

    Scanned certificates usually carry no text layer at all, so an empty
    string is a normal result rather than an error.
    """

    def __init__(self, max_pages: int = 4) -> None:
        self._max_pages = max_pages

    @abstractmethod
    def read(self, pdf_bytes: bytes) -> str:
        """Return the text of the first ``max_pages`` pages.

        Raises:
            PdfTextLayerError: if the payload is not a readable PDF.
        """

    @staticmethod
    def _join_pages(pages: list[str]) -> str:
        lines = [line.strip() for page in pages for line in page.splitlines()]
        return "\n".join(line for line in lines if line)
