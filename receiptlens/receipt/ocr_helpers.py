"""Pure OCR transformation helpers: image preparation and line assembly."""

from __future__ import annotations

import io
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from receiptlens.domain.receipt import RecognizedLine

if TYPE_CHECKING:
    from PIL import Image

MAX_IMAGE_DIMENSION = 3000  # Resize if either dimension exceeds this
OCR_IMAGE_PADDING = 50  # White padding around image to prevent edge truncation
MIN_DETECTION_CONFIDENCE = 0.5
MIN_TEXT_LENGTH = 1


def prepare_image(
    img: Image.Image, max_dimension: int = MAX_IMAGE_DIMENSION, padding: int = OCR_IMAGE_PADDING
) -> Image.Image:
    """
    Downscale an image that exceeds max_dimension and pad it with white.

    Args:
        img: Decoded image
        max_dimension: Maximum allowed dimension (width or height)
        padding: White padding to add around image (pixels)

    Returns:
        RGB image, aspect ratio preserved
    """
    from PIL import Image, ImageOps

    width, height = img.size
    if width > max_dimension or height > max_dimension:
        if width > height:
            new_size = (max_dimension, max(1, int(height * (max_dimension / width))))
        else:
            new_size = (max(1, int(width * (max_dimension / height))), max_dimension)
        img = img.resize(new_size, Image.Resampling.LANCZOS)

    img = img.convert("RGB")
    if padding > 0:
        img = ImageOps.expand(img, border=padding, fill="white")
    return img


def image_to_jpeg_bytes(img: Image.Image, quality: int = 95) -> bytes:
    buffer = io.BytesIO()
    img.convert("RGB").save(buffer, format="JPEG", quality=quality)
    return buffer.getvalue()


def _boxes_overlap_y(det1: dict[str, float], det2: dict[str, float], min_overlap_ratio: float = 0.5) -> bool:
    """Check if two boxes overlap vertically by at least min_overlap_ratio of the smaller one."""
    overlap = min(det1["y_max"], det2["y_max"]) - max(det1["y_min"], det2["y_min"])
    if overlap <= 0:
        return False
    smaller_height = min(det1["y_max"] - det1["y_min"], det2["y_max"] - det2["y_min"])
    # Avoid division by zero for degenerate boxes
    if smaller_height <= 0:
        return False
    return overlap / smaller_height >= min_overlap_ratio


def lines_from_detections(
    raw_result: dict[str, Any],
    padding: int = OCR_IMAGE_PADDING,
    min_confidence: float = MIN_DETECTION_CONFIDENCE,
) -> list[RecognizedLine]:
    """
    Group raw OCR service detections into reading-order text lines.

    Each detection is `[bbox, [text, confidence]]` with bbox as four
    `[x, y]` points in padded-image pixels. Detections whose vertical spans
    overlap are joined left to right; line confidence is the mean of its
    detections.

    Raises:
        ValueError: if the payload is not a mapping of well-formed detections
    """
    if not isinstance(raw_result, dict):
        raise ValueError(f"Expected a JSON object, got {type(raw_result).__name__}")
    detections = raw_result.get("detections") or []
    if not isinstance(detections, list):
        raise ValueError("detections must be a list")

    boxes: list[dict[str, Any]] = []
    for bbox, (text, confidence) in detections:
        if not isinstance(text, str):
            raise ValueError(f"Detection text must be a string, got {type(text).__name__}")
        if confidence < min_confidence or len(text.strip()) < MIN_TEXT_LENGTH:
            continue
        ys = [point[1] - padding for point in bbox]
        boxes.append(
            {
                "text": text.strip(),
                "confidence": float(confidence),
                "y_min": min(ys),
                "y_max": max(ys),
                "center_y": sum(ys) / len(ys),
                "min_x": min(point[0] - padding for point in bbox),
            }
        )

    boxes.sort(key=lambda d: (d["center_y"], d["min_x"]))

    grouped: list[list[dict[str, Any]]] = []
    for box in boxes:
        if grouped:
            current = grouped[-1]
            span = {
                "y_min": min(d["y_min"] for d in current),
                "y_max": max(d["y_max"] for d in current),
            }
            if _boxes_overlap_y(box, span):
                current.append(box)
                continue
        grouped.append([box])

    lines: list[RecognizedLine] = []
    for group in grouped:
        group.sort(key=lambda d: d["min_x"])
        text = " ".join(d["text"] for d in group)
        confidence = sum(d["confidence"] for d in group) / len(group)
        lines.append(RecognizedLine(text=text, confidence=confidence))
    return lines


def lines_from_tesseract_data(data: dict[str, list[Any]]) -> list[RecognizedLine]:
    """
    Assemble lines from a Tesseract `image_to_data` dictionary.

    Words sharing (block_num, par_num, line_num) form one line. Tesseract
    reports confidence 0-100 and -1 for non-word boxes, which are skipped.
    """
    lines: dict[tuple[int, int, int], list[tuple[str, float]]] = {}
    for i, word in enumerate(data.get("text", [])):
        word = str(word).strip()
        confidence = float(data["conf"][i])
        if not word or confidence < 0:
            continue
        key = (int(data["block_num"][i]), int(data["par_num"][i]), int(data["line_num"][i]))
        lines.setdefault(key, []).append((word, confidence))

    # dicts keep insertion order, which is Tesseract's reading order
    result: list[RecognizedLine] = []
    for words in lines.values():
        text = " ".join(word for word, _ in words)
        confidence = sum(conf for _, conf in words) / len(words) / 100.0
        result.append(RecognizedLine(text=text, confidence=confidence))
    return result


def join_recognized_lines(lines: Sequence[RecognizedLine], separator: str = "\n") -> str:
    """Join the top candidate of each line into one text blob."""
    return separator.join(line.text for line in lines if line.text.strip())
