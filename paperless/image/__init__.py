"""Scanned image records and their OCR pipeline."""
from .models import Image
from .pipeline import DEFAULT_SCRIPT, ImagePipeline, delete_image_files

__all__ = [
    "DEFAULT_SCRIPT",
    "Image",
    "ImagePipeline",
    "delete_image_files",
]
