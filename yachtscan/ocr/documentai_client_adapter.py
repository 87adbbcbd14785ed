import base64
import binascii
from typing import Any

from google.api_core import exceptions as api_exceptions
from google.api_core.client_options import ClientOptions
from google.auth import exceptions as auth_exceptions
from google.cloud import documentai

from yachtscan.extraction.file_analyzer import strip_data_url
from yachtscan.ocr.base import BaseOcrClient
from yachtscan.ocr.exceptions import OcrError, OcrNetworkError


class DocumentAIClientAdapter(BaseOcrClient):
    """Calls a Document AI processor directly through the Google client library.

    The service client is created on first use, so building the adapter
    does not require credentials to be present.
    """

    name = "documentai"

    def __init__(
        self,
        *,
        project_id: str,
        location: str,
        processor_id: str,
        timeout_seconds: int,
    ) -> None:
        if not project_id or not processor_id:
            raise ValueError(
                "documentai_project_id and documentai_processor_id are required "
                "for ocr_fallback_provider=documentai"
            )
        self._project_id = project_id
        self._location = location
        self._processor_id = processor_id
        self._timeout_seconds = timeout_seconds
        self._client: documentai.DocumentProcessorServiceClient | None = None

    def process_document(
        self,
        *,
        document_base64: str,
        mime_type: str,
        document_type: str,
        hint: str,
    ) -> Any:
        _ = document_type, hint
        try:
            content = base64.b64decode(strip_data_url(document_base64), validate=False)
        except (binascii.Error, ValueError) as exc:
            raise OcrError(f"Document payload is not valid base64: {exc}") from exc

        try:
            client = self._get_client()
            request = documentai.ProcessRequest(
                name=client.processor_path(self._project_id, self._location, self._processor_id),
                raw_document=documentai.RawDocument(content=content, mime_type=mime_type),
            )
            result = client.process_document(request=request, timeout=self._timeout_seconds)
        except auth_exceptions.GoogleAuthError as exc:
            raise OcrNetworkError(f"Document AI credentials unavailable: {exc}") from exc
        except api_exceptions.GoogleAPICallError as exc:
            raise OcrNetworkError(f"Document AI call failed: {exc}") from exc

        return {"document": documentai.Document.to_dict(result.document)}

    def _get_client(self) -> documentai.DocumentProcessorServiceClient:
        if self._client is None:
            options = ClientOptions(api_endpoint=f"{self._location}-documentai.googleapis.com")
            self._client = documentai.DocumentProcessorServiceClient(client_options=options)
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.transport.close()
            self._client = None
