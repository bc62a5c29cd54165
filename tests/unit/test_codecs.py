from __future__ import annotations

from io import BytesIO

import fitz
import pytest
from PIL import Image

from pagesmith.codecs import image_encoder, open_image, optimize_pdf, pdf_raster_encoder, png_compress_level
from pagesmith.documents import load_document
from pagesmith.exceptions import CorruptSourceError, DependencyError, UnsupportedFormatError
from pagesmith.typing.enums import ImageFormat, PdfPreset


@pytest.mark.parametrize(
    ("pillow_format", "expected"),
    [("JPEG", ImageFormat.JPEG), ("PNG", ImageFormat.PNG), ("WEBP", ImageFormat.WEBP)],
)
def test_open_image_detects_format(make_image, pillow_format: str, expected: ImageFormat) -> None:
    _, image_format = open_image(make_image(pillow_format), name="picture")

    assert image_format == expected


def test_open_image_rejects_unreadable_bytes() -> None:
    with pytest.raises(CorruptSourceError, match="picture"):
        open_image(b"not an image", name="picture")


def test_open_image_rejects_unsupported_format(make_image) -> None:
    with pytest.raises(UnsupportedFormatError, match="Unsupported image format 'GIF'"):
        open_image(make_image("GIF"), name="anim.gif")


def test_png_compress_level_spans_zlib_levels() -> None:
    assert png_compress_level(100) == 0
    assert png_compress_level(1) == 9
    assert 0 <= png_compress_level(50) <= 9


def test_jpeg_encoder_shrinks_with_quality(make_image) -> None:
    image, image_format = open_image(make_image("JPEG"), name="photo.jpg")
    encode = image_encoder(image, image_format)

    assert len(encode(20)) < len(encode(95))


def test_jpeg_encoder_flattens_alpha() -> None:
    buffer = BytesIO()
    Image.new("RGBA", (16, 16), (255, 0, 0, 128)).save(buffer, format="PNG")
    image, _ = open_image(buffer.getvalue(), name="overlay.png")

    data = image_encoder(image, ImageFormat.JPEG)(80)

    with Image.open(BytesIO(data)) as decoded:
        assert decoded.format == "JPEG"
        assert decoded.mode == "RGB"


def test_png_encoder_keeps_format(make_image) -> None:
    image, image_format = open_image(make_image("PNG"), name="shot.png")

    data = image_encoder(image, image_format)(30)

    with Image.open(BytesIO(data)) as decoded:
        assert decoded.format == "PNG"
        assert decoded.size == image.size


def test_pdf_raster_encoder_keeps_page_count_and_size(make_document) -> None:
    document = make_document(2)
    encode = pdf_raster_encoder(document, dpi=72)

    rebuilt = load_document(encode(50))

    assert rebuilt.page_count == 2


def test_pdf_raster_encoder_rejects_unreadable_document(make_document) -> None:
    document = make_document(1).model_copy(update={"data": b"broken"})

    with pytest.raises(CorruptSourceError):
        pdf_raster_encoder(document, dpi=72)


def test_optimize_pdf_keeps_text(make_document, page_texts) -> None:
    document = make_document(3)

    assert page_texts(optimize_pdf(document)) == ["Page 1", "Page 2", "Page 3"]


def test_open_image_requires_pillow(monkeypatch, make_image) -> None:
    monkeypatch.setattr("pagesmith.codecs.Image", None)

    with pytest.raises(DependencyError, match="pillow"):
        open_image(make_image("PNG"), name="picture")


@pytest.mark.parametrize("preset", list(PdfPreset))
def test_optimize_pdf_presets_keep_text(make_document, page_texts, preset: PdfPreset) -> None:
    document = make_document(2)

    assert page_texts(optimize_pdf(document, preset=preset)) == ["Page 1", "Page 2"]


def test_optimize_pdf_presets_are_deterministic(make_document) -> None:
    document = make_document(2)

    assert optimize_pdf(document, preset=PdfPreset.MAXIMUM) == optimize_pdf(document, preset=PdfPreset.MAXIMUM)


def _titled_document(make_pdf) -> bytes:
    with fitz.open(stream=make_pdf(1), filetype="pdf") as doc:
        doc.set_metadata({"title": "Quarterly report", "author": "Finance"})
        return doc.tobytes()


def test_optimize_pdf_keeps_metadata_by_default(make_pdf) -> None:
    document = load_document(_titled_document(make_pdf), name="titled.pdf")

    with fitz.open(stream=optimize_pdf(document), filetype="pdf") as doc:
        assert doc.metadata["title"] == "Quarterly report"


def test_optimize_pdf_strips_metadata(make_pdf) -> None:
    document = load_document(_titled_document(make_pdf), name="titled.pdf")

    with fitz.open(stream=optimize_pdf(document, strip_metadata=True), filetype="pdf") as doc:
        assert not doc.metadata["title"]
        assert not doc.metadata["author"]
