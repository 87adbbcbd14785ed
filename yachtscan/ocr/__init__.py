from yachtscan.ocr.adapter import OcrAdapter
from yachtscan.ocr.base import BaseOcrClient
from yachtscan.ocr.factory import OcrAdapterFactory

__all__ = ["BaseOcrClient", "OcrAdapter", "OcrAdapterFactory"]
