from typing import Any

import httpx

from yachtscan.ocr.base import BaseOcrClient
from yachtscan.ocr.exceptions import OcrError, OcrNetworkError


class EdgeFunctionClientAdapter(BaseOcrClient):
    """Posts the document to the backend function that fronts Document AI.

    The function takes ``{"action": ..., "payload": {...}}`` and answers
    with the processed document, sometimes wrapped in
    ``outputs.documentAI``.
    """

    name = "edge_function"

    def __init__(
        self,
        *,
        endpoint_url: str,
        api_key: str,
        processor_id: str,
        timeout_seconds: int,
        action: str = "run_test",
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not endpoint_url:
            raise ValueError("ocr_endpoint_url is required for ocr_provider=edge_function")
        self._endpoint_url = endpoint_url
        self._processor_id = processor_id
        self._action = action
        self._client = httpx.Client(
            timeout=timeout_seconds,
            headers={
                "Authorization": f"Bearer {api_key}",
                "apikey": api_key,
                "Content-Type": "application/json",
            },
            transport=transport,
        )

    def process_document(
        self,
        *,
        document_base64: str,
        mime_type: str,
        document_type: str,
        hint: str,
    ) -> Any:
        body = {
            "action": self._action,
            "payload": {
                "processorId": self._processor_id,
                "documentBase64": document_base64,
                "documentType": document_type,
                "mimeType": mime_type,
                "hint": hint,
            },
        }
        try:
            response = self._client.post(self._endpoint_url, json=body)
        except (httpx.ConnectError, httpx.TimeoutException) as exc:
            raise OcrNetworkError(f"OCR endpoint network error: {exc}") from exc
        except httpx.HTTPError as exc:
            raise OcrNetworkError(f"OCR endpoint request failed: {exc}") from exc

        if not response.is_success:
            raise OcrNetworkError(
                f"OCR endpoint returned {response.status_code}: {response.text[:200]}"
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise OcrError(f"OCR endpoint returned invalid JSON: {exc}") from exc

        if isinstance(data, dict):
            if data.get("error"):
                raise OcrError(f"OCR endpoint reported an error: {data['error']}")
            outputs = data.get("outputs")
            if isinstance(outputs, dict) and isinstance(outputs.get("documentAI"), dict):
                return outputs["documentAI"]
        return data

    def close(self) -> None:
        self._client.close()
