"""Encode-at-quality primitives for images (Pillow) and PDFs (PyMuPDF)."""

from __future__ import annotations

from io import BytesIO
from typing import TYPE_CHECKING, Any

try:
    import fitz
except Exception:  # pragma: no cover - optional dependency at runtime
    fitz: Any
    fitz = None

try:
    from PIL import Image
except Exception:  # pragma: no cover - optional dependency at runtime
    Image: Any
    Image = None

from pagesmith.documents import SAVE_OPTIONS, open_pdf
from pagesmith.exceptions import CorruptSourceError, DependencyError, UnsupportedFormatError
from pagesmith.typing.enums import ImageFormat, PdfPreset

if TYPE_CHECKING:
    from pagesmith.typing.models import SourceDocument
    from pagesmith.typing.protocol import QualityEncoder

_FORMATS_BY_PILLOW_NAME = {
    "JPEG": ImageFormat.JPEG,
    "MPO": ImageFormat.JPEG,
    "PNG": ImageFormat.PNG,
    "WEBP": ImageFormat.WEBP,
}
_PNG_MAX_COMPRESS_LEVEL = 9
_PRESET_SAVE_OPTIONS: dict[PdfPreset, dict[str, int | bool]] = {
    PdfPreset.LOW: {"garbage": 1, "no_new_id": True},
    PdfPreset.MEDIUM: {"garbage": 3, "deflate": True, "no_new_id": True},
    PdfPreset.HIGH: {"garbage": 4, "deflate": True, "clean": True, "no_new_id": True},
    PdfPreset.MAXIMUM: {
        "garbage": 4,
        "deflate": True,
        "deflate_images": True,
        "deflate_fonts": True,
        "clean": True,
        "use_objstms": 1,
        "no_new_id": True,
    },
}


def open_image(data: bytes, *, name: str) -> tuple[Image.Image, ImageFormat]:
    """Decode image bytes and detect their format.

    Args:
        data (bytes): Raw image bytes.
        name (str): Display name used in errors.

    Raises:
        DependencyError: If Pillow is not installed.
        CorruptSourceError: If Pillow cannot decode the bytes.
        UnsupportedFormatError: If the format is not JPEG, PNG or WebP.

    Returns:
        tuple[Image.Image, ImageFormat]: Decoded image and its format.
    """
    if Image is None:
        raise DependencyError(missing_package=["pillow"], message="image compression")

    try:
        image = Image.open(BytesIO(data))
        image.load()
    except OSError as exc:
        raise CorruptSourceError(name=name, message="Not a readable image") from exc

    image_format = _FORMATS_BY_PILLOW_NAME.get(image.format or "")
    if image_format is None:
        supported = ", ".join(member.value for member in ImageFormat)
        raise UnsupportedFormatError(message=f"Unsupported image format '{image.format}'. Expected one of: {supported}")
    return image, image_format


def png_compress_level(quality: int) -> int:
    """Map a 1-100 quality to a zlib compression level (100 -> 0, 1 -> 9)."""
    return round(_PNG_MAX_COMPRESS_LEVEL * (100 - quality) / 100)


def image_encoder(image: Image.Image, image_format: ImageFormat) -> QualityEncoder:
    """Build an encoder that re-saves `image` in its own format.

    Args:
        image (Image.Image): Decoded image.
        image_format (ImageFormat): Output format.

    Returns:
        QualityEncoder: Callable returning encoded bytes for a quality.
    """
    if image_format == ImageFormat.JPEG and image.mode not in {"RGB", "L"}:
        image = image.convert("RGB")

    def _encode(quality: int) -> bytes:
        if image_format == ImageFormat.PNG:
            options: dict[str, int | bool] = {"compress_level": png_compress_level(quality)}
        else:
            options = {"quality": quality}
            if image_format == ImageFormat.JPEG:
                options["optimize"] = True
        buffer = BytesIO()
        image.save(buffer, format=image_format.pillow_name, **options)
        return buffer.getvalue()

    return _encode


def pdf_raster_encoder(document: SourceDocument, *, dpi: int) -> QualityEncoder:
    """Build an encoder that rebuilds a PDF from JPEG page images.

    Pages are rasterized once; each call only re-encodes the page images at the
    requested quality and writes a new document with the original page sizes.

    Args:
        document (SourceDocument): Document to compress.
        dpi (int): Rasterization resolution.

    Raises:
        CorruptSourceError: If the document cannot be rendered.

    Returns:
        QualityEncoder: Callable returning PDF bytes for a quality.
    """
    with open_pdf(document.data, name=document.name) as doc:
        try:
            pages = [(page.rect, page.get_pixmap(dpi=dpi, alpha=False)) for page in doc]
        except Exception as exc:
            raise CorruptSourceError(name=document.name, message="Unable to render pages") from exc

    def _encode(quality: int) -> bytes:
        with fitz.open() as output:
            for rect, pixmap in pages:
                page = output.new_page(width=rect.width, height=rect.height)
                page.insert_image(page.rect, stream=pixmap.tobytes(output="jpeg", jpg_quality=quality))
            return output.tobytes(**SAVE_OPTIONS)

    return _encode


def optimize_pdf(
    document: SourceDocument,
    *,
    preset: PdfPreset = PdfPreset.HIGH,
    strip_metadata: bool = False,
) -> bytes:
    """Rewrite a PDF without re-encoding page content.

    Presets trade rewrite effort for size: `low` only drops unused objects,
    `maximum` also deflates images and fonts and packs objects into streams.

    Args:
        document (SourceDocument): Document to rewrite.
        preset (PdfPreset): How aggressively to rewrite.
        strip_metadata (bool): Clear the info dictionary and XMP metadata.

    Raises:
        CorruptSourceError: If the document cannot be rewritten.

    Returns:
        bytes: Rewritten PDF.
    """
    with open_pdf(document.data, name=document.name) as doc:
        try:
            if strip_metadata:
                doc.set_metadata({})
                doc.del_xml_metadata()
            return doc.tobytes(**_PRESET_SAVE_OPTIONS[preset])
        except Exception as exc:
            raise CorruptSourceError(name=document.name, message="Unable to write document") from exc
