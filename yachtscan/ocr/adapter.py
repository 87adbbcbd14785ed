from yachtscan.extraction.models import OcrExtractionResult
from yachtscan.logging.logger import Log
from yachtscan.ocr.base import BaseOcrClient
from yachtscan.ocr.exceptions import OcrError
from yachtscan.ocr.response_parser import (
    extract_confidence,
    extract_key_values,
    extract_text,
)


class OcrAdapter:
    """Runs a document through the configured transports in order.

    The first transport that answers wins. A transport failure moves on to
    the next one; when all of them fail the combined reasons are raised as
    a single OcrError.
    """

    def __init__(self, clients: list[BaseOcrClient], default_confidence: float = 0.95) -> None:
        if not clients:
            raise ValueError("OcrAdapter needs at least one client")
        self._clients = clients
        self._default_confidence = default_confidence

    @property
    def transports(self) -> list[str]:
        return [client.name for client in self._clients]

    def extract(
        self,
        *,
        document_base64: str,
        mime_type: str,
        document_type: str,
        hint: str,
    ) -> OcrExtractionResult:
        failures: list[str] = []
        for client in self._clients:
            try:
                response = client.process_document(
                    document_base64=document_base64,
                    mime_type=mime_type,
                    document_type=document_type,
                    hint=hint,
                )
            except OcrError as exc:
                Log.warning(f"OCR transport '{client.name}' failed: {exc}")
                failures.append(f"{client.name}: {exc}")
                continue
            return OcrExtractionResult(
                key_values=extract_key_values(response),
                text=extract_text(response),
                confidence=extract_confidence(response, self._default_confidence),
                document_type=document_type,
                transport=client.name,
            )
        raise OcrError("Document AI extraction failed: " + "; ".join(failures))

    def close(self) -> None:
        for client in self._clients:
            client.close()
