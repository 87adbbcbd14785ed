"""Offline OCR client.

Returns a canned Document AI style response for a Maltese registration
certificate. Handy for local runs and as a template for new transports:
implement BaseOcrClient and register the provider in OcrAdapterFactory.
"""

import copy
from typing import Any, ClassVar

from yachtscan.ocr.base import BaseOcrClient


class ExampleClientAdapter(BaseOcrClient):
    """No network calls; always answers with ``response``."""

    name = "example"

    DEFAULT_RESPONSE: ClassVar[dict[str, object]] = {
        "Name_o_fShip": "X",
        "Flag_State": "MALTA",
        "Length_overall": "45.2",
        "Certificate_No": "12345",
        "confidence": 0.95,
    }

    def __init__(self, response: dict[str, object] | None = None) -> None:
        self._response = response if response is not None else self.DEFAULT_RESPONSE

    def process_document(
        self,
        *,
        document_base64: str,
        mime_type: str,
        document_type: str,
        hint: str,
    ) -> Any:
        _ = document_base64, mime_type, document_type, hint
        return copy.deepcopy(self._response)
