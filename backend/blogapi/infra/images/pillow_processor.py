"""Pillow-backed validation and re-encoding of uploaded images."""

from __future__ import annotations

import io
from dataclasses import dataclass

from PIL import Image, ImageOps, UnidentifiedImageError

from blogapi.services._shared.errors import BusinessRuleError
from blogapi.services._shared.ports import ImageProcessor, ProcessedImage

ALLOWED_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "webp"})
ALLOWED_MIME_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png", "image/webp"})
ALLOWED_FORMATS = frozenset({"JPEG", "PNG", "WEBP"})


@dataclass(frozen=True, slots=True)
class PillowImageProcessor(ImageProcessor):
    """
    Validate uploads and re-encode them as JPEG.

    Images larger than ``max_width`` x ``max_height`` are downscaled keeping
    their aspect ratio; smaller ones keep their size. Re-encoding drops any
    metadata embedded in the original file.
    """

    max_size_bytes: int = 2 * 1024 * 1024
    max_width: int = 1920
    max_height: int = 1080
    quality: int = 85

    def validate(self, *, filename: str, content_type: str | None, size: int) -> None:
        """
        Reject empty, oversized or non-image uploads before decoding.

        :raises BusinessRuleError: With a client-facing message.
        """
        if size <= 0:
            raise BusinessRuleError("file is required")
        if size > self.max_size_bytes:
            limit_mb = self.max_size_bytes // (1024 * 1024)
            raise BusinessRuleError(f"image size too large (max {limit_mb}MB)")
        ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
        mime = (content_type or "").split(";", 1)[0].strip().lower()
        if ext not in ALLOWED_EXTENSIONS or (mime and mime not in ALLOWED_MIME_TYPES):
            raise BusinessRuleError("invalid image type (allowed: jpeg, jpg, png, webp)")

    def process(self, data: bytes) -> ProcessedImage:
        try:
            with Image.open(io.BytesIO(data)) as img:
                if img.format not in ALLOWED_FORMATS:
                    raise BusinessRuleError("invalid image type (allowed: jpeg, jpg, png, webp)")
                img.load()
                oriented = ImageOps.exif_transpose(img) or img
                oriented.thumbnail((self.max_width, self.max_height), Image.Resampling.LANCZOS)
                rgb = oriented.convert("RGB")
                out = io.BytesIO()
                rgb.save(out, format="JPEG", quality=self.quality, optimize=True)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
            raise BusinessRuleError("invalid image file") from exc

        return ProcessedImage(
            data=out.getvalue(),
            width=rgb.width,
            height=rgb.height,
            mime_type="image/jpeg",
            extension="jpg",
        )
