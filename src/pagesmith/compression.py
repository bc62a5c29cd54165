"""Image and PDF compression driven by the size-constrained quality search."""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING

from pagesmith.async_runner import run_jobs
from pagesmith.codecs import image_encoder, open_image, optimize_pdf, pdf_raster_encoder
from pagesmith.exceptions import ConfigurationError, SizeTargetUnreachableError
from pagesmith.logging import bind_operation, get_logger
from pagesmith.quality_search import search_with_config
from pagesmith.settings import Settings, get_settings
from pagesmith.typing.enums import CompressionMode, PdfPreset
from pagesmith.typing.models import CompressionResult, QualityAttempt

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pagesmith.typing.models import SourceDocument
    from pagesmith.typing.protocol import QualityEncoder

logger = get_logger(__name__)


def resolve_mode(*, quality: int | None, target_bytes: int | None, lossless: bool = False) -> CompressionMode:
    """Pick the compression mode from mutually exclusive caller options.

    Args:
        quality (int | None): Fixed quality (1-100).
        target_bytes (int | None): Byte budget.
        lossless (bool): Lossless rewrite (PDF only).

    Raises:
        ConfigurationError: If zero or several options are set, or a value is out of range.

    Returns:
        CompressionMode: Selected mode.
    """
    options = {
        CompressionMode.LOSSLESS: lossless,
        CompressionMode.QUALITY: quality is not None,
        CompressionMode.TARGET: target_bytes is not None,
    }
    chosen = [mode for mode, enabled in options.items() if enabled]
    if len(chosen) != 1:
        raise ConfigurationError(message="Choose exactly one of a quality, a target size or lossless mode")

    if quality is not None and not 1 <= quality <= 100:  # noqa: PLR2004
        raise ConfigurationError(message="Quality must be between 1 and 100")
    if target_bytes is not None and target_bytes <= 0:
        raise ConfigurationError(message="Target size must be a positive number of bytes")
    return chosen[0]


def _encode_to_result(
    encode: QualityEncoder,
    *,
    name: str,
    media_type: str,
    original_size: int,
    quality: int | None,
    target_bytes: int | None,
    allow_oversize: bool,
    settings: Settings,
) -> CompressionResult:
    """Encode once at `quality`, or search for `target_bytes`.

    Raises:
        SizeTargetUnreachableError: If the target cannot be met and oversize
            results are not allowed.
    """
    if target_bytes is None:
        data = encode(quality)  # type: ignore[arg-type]
        return CompressionResult(
            name=name,
            data=data,
            media_type=media_type,
            quality=quality,
            original_size=original_size,
            attempts=(QualityAttempt(quality=quality, size_bytes=len(data)),),  # type: ignore[arg-type]
        )

    try:
        found = search_with_config(encode, target_bytes, settings.quality_search_config())
    except SizeTargetUnreachableError as exc:
        if not allow_oversize:
            raise
        logger.warning(
            "Returning oversized result",
            extra={"output": name, "size_bytes": exc.size_bytes, "target": target_bytes},
        )
        return CompressionResult(
            name=name,
            data=exc.data,
            media_type=media_type,
            quality=exc.quality,
            original_size=original_size,
            target_bytes=target_bytes,
            target_met=False,
            attempts=tuple(QualityAttempt(quality=q, size_bytes=size) for q, size in exc.attempts),
        )

    return CompressionResult(
        name=name,
        data=found.data,
        media_type=media_type,
        quality=found.quality,
        original_size=original_size,
        target_bytes=target_bytes,
        attempts=found.attempts,
    )


def compress_image(
    data: bytes,
    *,
    name: str = "image",
    quality: int | None = None,
    target_bytes: int | None = None,
    allow_oversize: bool | None = None,
    settings: Settings | None = None,
) -> CompressionResult:
    """Compress a JPEG, PNG or WebP image in its own format.

    Args:
        data (bytes): Raw image bytes.
        name (str): Display name used in errors and logs.
        quality (int | None): Fixed quality, mutually exclusive with `target_bytes`.
        target_bytes (int | None): Byte budget for the quality search.
        allow_oversize (bool | None): Accept the floor-quality artifact when the
            budget cannot be met; defaults to the `ALLOW_OVERSIZE_RESULT` setting.
        settings (Settings | None): Runtime settings.

    Returns:
        CompressionResult: Compressed image, named `compressed.<format>`.
    """
    config = settings or get_settings()
    resolve_mode(quality=quality, target_bytes=target_bytes)
    bind_operation("compress-image", source=name)

    image, image_format = open_image(data, name=name)
    result = _encode_to_result(
        image_encoder(image, image_format),
        name=f"compressed.{image_format.value}",
        media_type=image_format.media_type,
        original_size=len(data),
        quality=quality,
        target_bytes=target_bytes,
        allow_oversize=config.allow_oversize_result if allow_oversize is None else allow_oversize,
        settings=config,
    )
    logger.info(
        "Image compressed",
        extra={"original_size": result.original_size, "size_bytes": result.size_bytes, "quality": result.quality},
    )
    return result


def compress_images(
    images: Sequence[tuple[str, bytes]],
    *,
    quality: int | None = None,
    target_bytes: int | None = None,
    allow_oversize: bool | None = None,
    settings: Settings | None = None,
) -> list[CompressionResult]:
    """Compress independent images concurrently, keeping input order.

    Args:
        images (Sequence[tuple[str, bytes]]): `(name, data)` pairs.
        quality (int | None): Fixed quality for every image.
        target_bytes (int | None): Byte budget applied to each image.
        allow_oversize (bool | None): See `compress_image`.
        settings (Settings | None): Runtime settings.

    Returns:
        list[CompressionResult]: One result per image.
    """
    config = settings or get_settings()
    resolve_mode(quality=quality, target_bytes=target_bytes)
    jobs = [
        partial(
            compress_image,
            data,
            name=name,
            quality=quality,
            target_bytes=target_bytes,
            allow_oversize=allow_oversize,
            settings=config,
        )
        for name, data in images
    ]
    return run_jobs(jobs, concurrency=config.compression_concurrency)


def compress_pdf(
    document: SourceDocument,
    *,
    quality: int | None = None,
    target_bytes: int | None = None,
    lossless: bool = False,
    preset: PdfPreset | None = None,
    strip_metadata: bool = False,
    allow_oversize: bool | None = None,
    settings: Settings | None = None,
) -> CompressionResult:
    """Compress a PDF losslessly, at a fixed quality, or to a byte budget.

    Lossy modes rasterize each page at `PDF_RASTER_DPI` and embed JPEG page
    images; text stops being selectable.

    Args:
        document (SourceDocument): Document to compress.
        quality (int | None): Fixed JPEG quality for page images.
        target_bytes (int | None): Byte budget for the quality search.
        lossless (bool): Rewrite without touching page content.
        preset (PdfPreset | None): Lossless rewrite level; implies `lossless`.
            Defaults to `high` for lossless requests.
        strip_metadata (bool): Clear document metadata on lossless rewrites.
        allow_oversize (bool | None): See `compress_image`.
        settings (Settings | None): Runtime settings.

    Returns:
        CompressionResult: Compressed PDF, named `compressed-<source name>`.
    """
    config = settings or get_settings()
    mode = resolve_mode(quality=quality, target_bytes=target_bytes, lossless=lossless or preset is not None)
    bind_operation("compress-pdf", source=document.name, mode=str(mode))
    name = f"compressed-{document.name}"

    if mode == CompressionMode.LOSSLESS:
        result = CompressionResult(
            name=name,
            data=optimize_pdf(document, preset=preset or PdfPreset.HIGH, strip_metadata=strip_metadata),
            media_type="application/pdf",
            original_size=document.size_bytes,
        )
    else:
        result = _encode_to_result(
            pdf_raster_encoder(document, dpi=config.pdf_raster_dpi),
            name=name,
            media_type="application/pdf",
            original_size=document.size_bytes,
            quality=quality,
            target_bytes=target_bytes,
            allow_oversize=config.allow_oversize_result if allow_oversize is None else allow_oversize,
            settings=config,
        )

    logger.info(
        "PDF compressed",
        extra={"original_size": result.original_size, "size_bytes": result.size_bytes, "quality": result.quality},
    )
    return result
