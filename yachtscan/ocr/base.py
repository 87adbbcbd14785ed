from abc import ABC, abstractmethod
from typing import Any


class BaseOcrClient(ABC):
    """Contract for one transport to a document-understanding service."""

    name: str = "base"

    @abstractmethod
    def process_document(
        self,
        *,
        document_base64: str,
        mime_type: str,
        document_type: str,
        hint: str,
    ) -> Any:
        """Return the vendor response, decoded but otherwise untouched.

        Raises:
            OcrNetworkError: on transport failures.
            OcrError: when the service reports an error.
        """

    def close(self) -> None:
        """Release any connection the transport holds."""
