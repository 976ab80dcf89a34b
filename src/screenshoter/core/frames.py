"""
Frame types for Screenshoter.

RawFrame is the buffer handed out by a capture source: BGRA pixels, possibly
with padding at the end of each row. CaptureFrame is the decoded PIL image
that the rest of the pipeline works with.
"""

from dataclasses import dataclass
from typing import Optional

from PIL import Image


@dataclass(frozen=True)
class CaptureFrame:
    """Decoded raster image plus its pixel dimensions."""

    image: Image.Image
    width: int
    height: int


class RawFrame:
    """
    Raw BGRA pixel buffer from a capture source.

    The buffer must be released with close() (or by using the frame as a
    context manager) once the caller is done with it.
    """

    def __init__(self, bgra: bytes, width: int, height: int, stride: Optional[int] = None):
        self.width = width
        self.height = height
        self.stride = stride if stride is not None else width * 4
        if self.stride < width * 4:
            raise ValueError(f"Stride {self.stride} is smaller than a row of {width} pixels")
        self._buffer: Optional[bytes] = bgra
        self.closed = False

    @property
    def row_padding(self) -> int:
        return self.stride - self.width * 4

    def to_image(self) -> Image.Image:
        """
        Convert the buffer to an RGB PIL image, dropping row padding.

        Raises:
            ValueError: If the frame was already closed
        """
        if self._buffer is None:
            raise ValueError("Frame already closed")
        return Image.frombuffer(
            "RGB", (self.width, self.height), self._buffer, "raw", "BGRX", self.stride, 1
        )

    def to_capture_frame(self) -> CaptureFrame:
        return CaptureFrame(image=self.to_image(), width=self.width, height=self.height)

    def close(self) -> None:
        self._buffer = None
        self.closed = True

    def __enter__(self) -> "RawFrame":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
