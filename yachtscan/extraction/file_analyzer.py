import base64
import binascii

from yachtscan.extraction.models import ExtractionRequest, FileAnalysisResult

_SNIFF_CHARS = 100
_PDF_HIGH_QUALITY_BYTES = 100_000
_IMAGE_HIGH_QUALITY_BYTES = 500_000
_IMAGE_MEDIUM_QUALITY_BYTES = 100_000

_CATEGORY_KEYWORDS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("certificate", "registration"), "yacht_certificate"),
    (("insurance",), "insurance_document"),
    (("crew", "license"), "crew_document"),
)

_DOCUMENT_TYPES = {
    "yacht_certificate": "yacht_registration",
    "insurance_document": "insurance_certificate",
    "crew_document": "crew_license",
}

DEFAULT_MIME_TYPE = "application/octet-stream"
AUTO_DETECT = "auto_detect"


class FileAnalyzer:
    """Classifies an incoming document before it is sent to OCR.

    Only cheap signals are used: the base64 head, the file name and the
    payload size. Missing signals fall back to ``auto_detect`` and
    ``medium`` quality.
    """

    def analyze(self, request: ExtractionRequest) -> FileAnalysisResult:
        mime_type = self.detect_mime_type(request.file_base64, request.mime_type)
        category = self.categorize(request.file_name, request.category_hint)
        size_bytes = len(strip_data_url(request.file_base64)) * 3 // 4
        quality = self.assess_quality(size_bytes, mime_type)
        return FileAnalysisResult(
            mime_type=mime_type,
            category=category,
            quality=quality,
            size_bytes=size_bytes,
            preprocessing_steps=self._preprocessing_steps(mime_type, quality, category),
            recommendations=self._recommendations(mime_type, quality),
        )

    @staticmethod
    def detect_mime_type(file_base64: str, declared: str = "") -> str:
        if file_base64.startswith("data:"):
            header = file_base64[5:].split(",", 1)[0]
            mime_type = header.split(";", 1)[0].strip()
            if mime_type:
                return mime_type

        head = file_base64[:_SNIFF_CHARS]
        head = head[: len(head) - len(head) % 4]
        try:
            raw = base64.b64decode(head, validate=False)
        except (binascii.Error, ValueError):
            raw = b""
        if raw.startswith(b"%PDF"):
            return "application/pdf"
        if b"JFIF" in raw or b"Exif" in raw or raw.startswith(b"\xff\xd8\xff"):
            return "image/jpeg"
        if raw.startswith(b"\x89PNG"):
            return "image/png"
        return declared or DEFAULT_MIME_TYPE

    @staticmethod
    def categorize(file_name: str, hint: str | None = None) -> str:
        name = file_name.lower()
        for keywords, category in _CATEGORY_KEYWORDS:
            if any(keyword in name for keyword in keywords):
                return category
        return hint or AUTO_DETECT

    @staticmethod
    def assess_quality(size_bytes: int, mime_type: str) -> str:
        if mime_type == "application/pdf":
            return "high" if size_bytes > _PDF_HIGH_QUALITY_BYTES else "medium"
        if mime_type.startswith("image/"):
            if size_bytes > _IMAGE_HIGH_QUALITY_BYTES:
                return "high"
            if size_bytes > _IMAGE_MEDIUM_QUALITY_BYTES:
                return "medium"
            return "low"
        return "medium"

    @staticmethod
    def _preprocessing_steps(mime_type: str, quality: str, category: str) -> list[str]:
        steps: list[str] = []
        if mime_type.startswith("image/") and quality == "low":
            steps.append("image_enhancement")
        if category == "yacht_certificate":
            steps.append("yacht_certificate_optimization")
        steps.extend(["base64_validation", "format_normalization"])
        return steps

    @staticmethod
    def _recommendations(mime_type: str, quality: str) -> list[str]:
        recommendations = ["use_yacht_certificate_patterns"]
        if quality == "high":
            recommendations.append("prefer_structured_extraction")
        else:
            recommendations.append("emphasize_pattern_recognition")
        if mime_type == "application/pdf":
            recommendations.append("extract_text_layers")
        return recommendations


def document_type_for(category: str) -> str:
    """Document-type enum the OCR service expects for a category."""
    return _DOCUMENT_TYPES.get(category, AUTO_DETECT)


def build_ocr_hint(analysis: FileAnalysisResult) -> str:
    return "; ".join(analysis.recommendations)


def strip_data_url(file_base64: str) -> str:
    if file_base64.startswith("data:") and "," in file_base64:
        return file_base64.split(",", 1)[1]
    return file_base64
