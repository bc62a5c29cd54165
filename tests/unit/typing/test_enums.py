from __future__ import annotations

import pytest

from pagesmith.typing.enums import CompressionMode, ImageFormat, PagePolicy, TransformKind


def test_transform_kind_from_str() -> None:
    assert TransformKind.from_str("reorder") == TransformKind.REORDER


def test_page_policy_from_str_raises_on_invalid_value() -> None:
    with pytest.raises(ValueError, match="Unsupported PagePolicy value"):
        PagePolicy.from_str("shuffle")


def test_image_format_exposes_media_type_and_pillow_name() -> None:
    assert ImageFormat.WEBP.media_type == "image/webp"
    assert ImageFormat.JPEG.pillow_name == "JPEG"


def test_compression_mode_to_str() -> None:
    assert CompressionMode.TARGET.to_str() == "target"
