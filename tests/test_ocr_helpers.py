"""Tests for OCR transformation helpers."""

import pytest
from PIL import Image

from receiptlens.domain.receipt import RecognizedLine
from receiptlens.receipt.ocr_helpers import (
    join_recognized_lines,
    lines_from_detections,
    lines_from_tesseract_data,
    prepare_image,
)


def _bbox(x0: int, y0: int, x1: int, y1: int) -> list[list[int]]:
    return [[x0, y0], [x1, y0], [x1, y1], [x0, y1]]


def test_detections_on_the_same_row_join_left_to_right() -> None:
    raw_result = {
        "status": "success",
        "detections": [
            [_bbox(760, 210, 920, 248), ["17.19", 0.99]],
            [_bbox(120, 210, 500, 250), ["COKE ZERO", 0.97]],
            [_bbox(120, 320, 550, 360), ["TOTAL", 0.95]],
            [_bbox(760, 324, 900, 356), ["17.19", 0.93]],
        ],
    }

    lines = lines_from_detections(raw_result, padding=0)

    assert [line.text for line in lines] == ["COKE ZERO 17.19", "TOTAL 17.19"]
    assert abs(lines[0].confidence - 0.98) < 1e-9


def test_low_confidence_and_empty_detections_are_dropped() -> None:
    raw_result = {
        "detections": [
            [_bbox(10, 10, 200, 40), ["WALMART", 0.99]],
            [_bbox(10, 100, 200, 140), ["noise", 0.2]],
            [_bbox(10, 200, 200, 240), ["   ", 0.99]],
        ]
    }

    lines = lines_from_detections(raw_result, padding=0)

    assert [line.text for line in lines] == ["WALMART"]


def test_padding_is_removed_from_coordinates() -> None:
    raw_result = {
        "detections": [
            [_bbox(60, 60, 200, 90), ["first", 0.9]],
            [_bbox(60, 150, 200, 180), ["second", 0.9]],
        ]
    }

    lines = lines_from_detections(raw_result, padding=50)

    assert [line.text for line in lines] == ["first", "second"]


def test_tesseract_words_group_into_lines() -> None:
    data = {
        "text": ["", "Total:", "$42.50", "", "Visa", "1234"],
        "conf": [-1, 90, 80, -1, 70, 50],
        "block_num": [1, 1, 1, 1, 1, 1],
        "par_num": [1, 1, 1, 1, 1, 1],
        "line_num": [0, 1, 1, 0, 2, 2],
    }

    lines = lines_from_tesseract_data(data)

    assert [line.text for line in lines] == ["Total: $42.50", "Visa 1234"]
    assert abs(lines[0].confidence - 0.85) < 1e-9
    assert abs(lines[1].confidence - 0.60) < 1e-9


def test_prepare_image_downscales_and_pads() -> None:
    img = Image.new("L", (6000, 3000), color=0)

    prepared = prepare_image(img, max_dimension=3000, padding=50)

    assert prepared.mode == "RGB"
    assert prepared.size == (3100, 1600)
    assert prepared.getpixel((0, 0)) == (255, 255, 255)


def test_prepare_image_leaves_small_images_unscaled() -> None:
    img = Image.new("RGB", (400, 300), color="black")
    assert prepare_image(img, padding=0).size == (400, 300)


def test_join_recognized_lines_skips_blank_lines() -> None:
    lines = [RecognizedLine("Walmart"), RecognizedLine("  "), RecognizedLine("Total 5.00")]
    assert join_recognized_lines(lines) == "Walmart\nTotal 5.00"
    assert join_recognized_lines(lines, separator=" ") == "Walmart Total 5.00"


@pytest.mark.parametrize(
    "raw_result",
    [
        [],
        {"detections": {"not": "a list"}},
        {"detections": [[_bbox(0, 0, 10, 10), [None, 0.9]]]},
    ],
)
def test_malformed_detection_payloads_raise_value_error(raw_result) -> None:
    with pytest.raises(ValueError):
        lines_from_detections(raw_result, padding=0)
