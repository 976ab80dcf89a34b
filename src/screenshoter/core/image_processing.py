#!/usr/bin/env python3
"""
Image Processing for Screenshoter

This module provides functions for preparing captured frames for storage and
for preview: RGB normalisation, lossless encoding to a stream, and bounded
preview thumbnails.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- PIL Image object (1920x1080)
- Preview limits: max_width=640, max_height=640

Expected output:
- Preview image (640x360)
- PNG bytes written to the given stream
"""

import io
from typing import BinaryIO, Dict, Any

from PIL import Image
from loguru import logger

from screenshoter.core.constants import IMAGE_SETTINGS


def resize_image_if_needed(
    img: Image.Image,
    max_width: int = IMAGE_SETTINGS["PREVIEW_MAX_WIDTH"],
    max_height: int = IMAGE_SETTINGS["PREVIEW_MAX_HEIGHT"]
) -> Image.Image:
    """
    Resizes an image if it exceeds maximum dimensions while preserving aspect ratio.

    Args:
        img: PIL Image object to resize
        max_width: Maximum width allowed
        max_height: Maximum height allowed

    Returns:
        PIL.Image: Resized image or original if no resize needed
    """
    width, height = img.size
    if width <= max_width and height <= max_height:
        return img

    scale_factor = min(max_width / width, max_height / height)
    new_width = max(1, int(width * scale_factor))
    new_height = max(1, int(height * scale_factor))

    logger.debug(f"Resizing image from {width}x{height} to {new_width}x{new_height}")
    return img.resize((new_width, new_height), Image.LANCZOS)


def ensure_rgb(img: Image.Image) -> Image.Image:
    """
    Converts image to RGB mode, flattening transparency onto white.

    Args:
        img: PIL Image object to convert

    Returns:
        PIL.Image: Image in RGB mode
    """
    if img.mode == 'RGBA':
        background = Image.new('RGB', img.size, (255, 255, 255))
        background.paste(img, mask=img.split()[3])
        return background
    elif img.mode != 'RGB':
        return img.convert('RGB')
    return img


def encode_image(img: Image.Image, stream: BinaryIO, image_format: str = IMAGE_SETTINGS["FORMAT"]) -> None:
    """
    Encode an image into an open binary stream.

    Args:
        img: PIL Image object to encode
        stream: Writable binary stream
        image_format: PIL format name

    Raises:
        OSError: If encoding or writing fails
    """
    ensure_rgb(img).save(stream, format=image_format)


def encode_image_to_bytes(img: Image.Image, image_format: str = IMAGE_SETTINGS["FORMAT"]) -> bytes:
    buffer = io.BytesIO()
    encode_image(img, buffer, image_format)
    return buffer.getvalue()


def make_preview(img: Image.Image) -> Dict[str, Any]:
    """
    Build a preview thumbnail for the accept/reject step.

    Args:
        img: Captured image

    Returns:
        Dict[str, Any]: Thumbnail image with original and preview sizes
    """
    preview = resize_image_if_needed(ensure_rgb(img))
    return {
        "image": preview,
        "original_size": img.size,
        "preview_size": preview.size,
    }


if __name__ == "__main__":
    """Validate image processing functions with real test data"""
    import sys

    all_validation_failures = []
    total_tests = 0

    # Test 1: Image resizing
    total_tests += 1
    test_img = Image.new('RGB', (1920, 1080), color='red')
    resized_img = resize_image_if_needed(test_img)
    if resized_img.size != (640, 360):
        all_validation_failures.append(f"Image resize test: Expected (640, 360), got {resized_img.size}")

    # Test 2: RGBA conversion
    total_tests += 1
    rgb_img = ensure_rgb(Image.new('RGBA', (100, 100), color=(255, 0, 0, 128)))
    if rgb_img.mode != 'RGB':
        all_validation_failures.append(f"RGBA conversion test: Expected 'RGB', got '{rgb_img.mode}'")

    # Test 3: PNG round trip
    total_tests += 1
    data = encode_image_to_bytes(Image.new('RGB', (50, 50), color='blue'))
    decoded = Image.open(io.BytesIO(data))
    if decoded.format != "PNG" or decoded.size != (50, 50):
        all_validation_failures.append(f"PNG encode test: got {decoded.format} {decoded.size}")

    if all_validation_failures:
        print(f"❌ VALIDATION FAILED - {len(all_validation_failures)} of {total_tests} tests failed:")
        for failure in all_validation_failures:
            print(f"  - {failure}")
        sys.exit(1)
    else:
        print(f"✅ VALIDATION PASSED - All {total_tests} tests produced expected results")
        print("Image processing functions are validated and ready for use")
        sys.exit(0)
