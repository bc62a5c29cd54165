"""Size-constrained quality search.

Bounded linear descent: encode at `start`, then at every `step` below it down
to `floor`, and stop at the first artifact that fits the byte budget.
Encoders are only roughly monotonic in quality versus size, so every level is
visited instead of bisecting. A lower quality can occasionally produce a larger
artifact; the search does not correct for that.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pagesmith.exceptions import ConfigurationError, SizeTargetUnreachableError
from pagesmith.logging import get_logger
from pagesmith.typing.models import QualityAttempt, QualitySearchConfig, QualitySearchResult

if TYPE_CHECKING:
    from pagesmith.typing.protocol import QualityEncoder

logger = get_logger(__name__)


def search_quality(
    encode: QualityEncoder,
    target_bytes: int,
    *,
    start: int = 100,
    floor: int = 10,
    step: int = 5,
) -> QualitySearchResult:
    """Find the first quality, descending from `start`, whose output fits `target_bytes`.

    When `step` does not divide `start - floor`, the last attempt is clamped to
    `floor`, so at most ``ceil((start - floor) / step) + 1`` encodes happen and a
    failed search always ends at `floor`.

    Args:
        encode (QualityEncoder): Encodes the artifact at a quality level.
        target_bytes (int): Byte budget, inclusive.
        start (int): First quality tried.
        floor (int): Lowest quality tried.
        step (int): Decrement between attempts.

    Raises:
        ConfigurationError: If the budget or bounds are invalid.
        SizeTargetUnreachableError: If even `floor` exceeds the budget; the
            floor-quality artifact travels with the error.

    Returns:
        QualitySearchResult: Fitting artifact, its quality and the attempt log.
    """
    if target_bytes <= 0:
        raise ConfigurationError(message="Target size must be a positive number of bytes")
    try:
        config = QualitySearchConfig(start=start, floor=floor, step=step)
    except ValueError as exc:
        raise ConfigurationError(message=f"Invalid quality search bounds: {exc}") from exc

    attempts: list[QualityAttempt] = []
    quality = config.start
    while True:
        data = encode(quality)
        attempts.append(QualityAttempt(quality=quality, size_bytes=len(data)))
        logger.debug("Quality attempt", extra={"quality": quality, "size_bytes": len(data), "target": target_bytes})

        if len(data) <= target_bytes:
            logger.info(
                "Size target met",
                extra={"quality": quality, "size_bytes": len(data), "attempts": len(attempts)},
            )
            return QualitySearchResult(data=data, quality=quality, attempts=tuple(attempts))

        if quality <= config.floor:
            logger.warning(
                "Size target unreachable",
                extra={"quality": quality, "size_bytes": len(data), "target": target_bytes},
            )
            raise SizeTargetUnreachableError(
                target_bytes=target_bytes,
                quality=quality,
                data=data,
                attempts=tuple((attempt.quality, attempt.size_bytes) for attempt in attempts),
            )

        quality = max(quality - config.step, config.floor)


def search_with_config(
    encode: QualityEncoder,
    target_bytes: int,
    config: QualitySearchConfig,
) -> QualitySearchResult:
    """Run `search_quality` with bounds taken from a config object."""
    return search_quality(encode, target_bytes, start=config.start, floor=config.floor, step=config.step)
