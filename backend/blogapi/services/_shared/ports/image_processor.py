from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class ProcessedImage:
    """
    Re-encoded image ready to be stored.

    :param data: Encoded bytes.
    :param width: Pixel width after resizing.
    :param height: Pixel height after resizing.
    :param mime_type: MIME type of ``data``.
    :param extension: File extension without the dot.
    """

    data: bytes
    width: int
    height: int
    mime_type: str
    extension: str


class ImageProcessor(Protocol):
    """Port validating and normalizing uploaded images."""

    def validate(self, *, filename: str, content_type: str | None, size: int) -> None: ...

    def process(self, data: bytes) -> ProcessedImage: ...
