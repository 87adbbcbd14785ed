import argparse
import base64
import json
import sys
from dataclasses import asdict
from pathlib import Path

from yachtscan.config.settings import Settings
from yachtscan.extraction.models import ExtractionRequest
from yachtscan.extraction.processor import build_processor
from yachtscan.logging.logger import Log


def main(argv: list[str] | None = None) -> int:
    """Entry point: load settings -> build processor -> extract one file."""
    parser = argparse.ArgumentParser(
        prog="yachtscan", description="Extract yacht certificate fields from a document."
    )
    parser.add_argument("path", type=Path, help="PDF or image to scan")
    parser.add_argument("--mime-type", default="", help="declared MIME type, if known")
    parser.add_argument("--category", default=None, help="document category hint")
    args = parser.parse_args(argv)

    settings = Settings()
    Log.configure(settings.log_level)

    processor = build_processor(settings)
    try:
        request = ExtractionRequest(
            file_base64=base64.b64encode(args.path.read_bytes()).decode("ascii"),
            file_name=args.path.name,
            mime_type=args.mime_type,
            category_hint=args.category,
        )
        result = processor.extract(request)
    finally:
        processor.close()
    json.dump(asdict(result), sys.stdout, indent=2, default=str)
    sys.stdout.write("\n")
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
