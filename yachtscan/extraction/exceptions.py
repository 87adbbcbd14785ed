class ExtractionError(Exception):
    """Base exception for failures that abort an extraction run."""


class RulesLoadError(ExtractionError):
    """Raised when a bundled rule table is missing or malformed."""
