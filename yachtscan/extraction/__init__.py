from yachtscan.extraction.exceptions import ExtractionError, RulesLoadError
from yachtscan.extraction.models import ExtractionRequest, ExtractionResult

__all__ = ["ExtractionError", "ExtractionRequest", "ExtractionResult", "RulesLoadError"]
