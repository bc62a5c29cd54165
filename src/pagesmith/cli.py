"""CLI entry point for Pagesmith."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import TYPE_CHECKING

from pagesmith import __version__, logger
from pagesmith.archive import deliverable
from pagesmith.compression import compress_image, compress_pdf
from pagesmith.dependencies import ensure_document_dependencies, ensure_image_dependencies
from pagesmith.dispatcher import run_transform
from pagesmith.documents import load_document_file
from pagesmith.exceptions import PackageError
from pagesmith.logging import configure_logging
from pagesmith.settings import Settings, get_settings
from pagesmith.typing.enums import PdfPreset
from pagesmith.typing.models import ExtractSpec, MergeSpec, RemoveSpec, ReorderSpec, SplitSpec

if TYPE_CHECKING:
    from collections.abc import Callable

    from pagesmith.typing.models import CompressionResult, OutputDocument

_BYTES_PER_KB = 1024


def _positive_int(value: str) -> int:
    """Parse a strictly positive integer CLI value.

    Args:
        value (str): Raw CLI value.

    Raises:
        argparse.ArgumentTypeError: If the value is not a positive integer.

    Returns:
        int: Parsed value.
    """
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got '{value}'") from exc
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got '{value}'")
    return number


def _add_compression_options(parser: argparse.ArgumentParser, *, lossless: bool) -> None:
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("--quality", type=_positive_int, default=None, help="Fixed quality, 1-100")
    mode.add_argument("--target-kb", type=_positive_int, default=None, dest="target_kb", help="Size budget in KB")
    if lossless:
        mode.add_argument("--lossless", action="store_true", help="Rewrite without re-encoding pages")
        mode.add_argument(
            "--preset",
            type=PdfPreset.from_str,
            default=None,
            choices=list(PdfPreset),
            help="Lossless rewrite level",
        )
        parser.add_argument(
            "--strip-metadata",
            action="store_true",
            dest="strip_metadata",
            help="Clear document metadata on lossless rewrites",
        )
    parser.add_argument(
        "--allow-oversize",
        action="store_true",
        dest="allow_oversize",
        help="Keep the minimum-quality result when the budget cannot be met",
    )


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser.

    Returns:
        argparse.ArgumentParser: The configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="pagesmith")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command")

    merge_parser = subparsers.add_parser("merge", help="Concatenate PDFs in the given order")
    merge_parser.add_argument("inputs", nargs="+", type=Path)
    merge_parser.add_argument("--output", type=Path, default=None, dest="output_path")

    split_parser = subparsers.add_parser("split", help="Write one PDF per page range, zipped")
    split_parser.add_argument("input_path", type=Path)
    split_parser.add_argument("--range", action="append", required=True, dest="ranges", help="e.g. 1-3 or 2,5")
    split_parser.add_argument("--output", type=Path, default=None, dest="output_path")

    extract_parser = subparsers.add_parser("extract", help="Keep only the listed pages")
    extract_parser.add_argument("input_path", type=Path)
    extract_parser.add_argument("--pages", required=True)
    extract_parser.add_argument("--output", type=Path, default=None, dest="output_path")

    remove_parser = subparsers.add_parser("remove", help="Drop the listed pages")
    remove_parser.add_argument("input_path", type=Path)
    remove_parser.add_argument("--pages", required=True)
    remove_parser.add_argument("--output", type=Path, default=None, dest="output_path")

    reorder_parser = subparsers.add_parser("reorder", help="Rewrite pages in a new order")
    reorder_parser.add_argument("input_path", type=Path)
    reorder_parser.add_argument("--order", required=True, help="Every page exactly once, e.g. 3,1,2")
    reorder_parser.add_argument("--output", type=Path, default=None, dest="output_path")

    image_parser = subparsers.add_parser("compress-image", help="Compress a JPEG, PNG or WebP image")
    image_parser.add_argument("input_path", type=Path)
    image_parser.add_argument("--output", type=Path, default=None, dest="output_path")
    _add_compression_options(image_parser, lossless=False)

    pdf_parser = subparsers.add_parser("compress-pdf", help="Compress a PDF")
    pdf_parser.add_argument("input_path", type=Path)
    pdf_parser.add_argument("--output", type=Path, default=None, dest="output_path")
    _add_compression_options(pdf_parser, lossless=True)

    return parser


def _target_bytes(args: argparse.Namespace) -> int | None:
    target_kb = getattr(args, "target_kb", None)
    return target_kb * _BYTES_PER_KB if target_kb is not None else None


def _run_merge(args: argparse.Namespace, settings: Settings) -> OutputDocument:  # noqa: ARG001
    documents = tuple(load_document_file(path) for path in args.inputs)
    return deliverable(run_transform(MergeSpec(documents=documents)))


def _run_split(args: argparse.Namespace, settings: Settings) -> OutputDocument:  # noqa: ARG001
    spec = SplitSpec(document=load_document_file(args.input_path), ranges=tuple(args.ranges))
    return deliverable(run_transform(spec))


def _run_extract(args: argparse.Namespace, settings: Settings) -> OutputDocument:  # noqa: ARG001
    spec = ExtractSpec(document=load_document_file(args.input_path), keep=args.pages)
    return deliverable(run_transform(spec))


def _run_remove(args: argparse.Namespace, settings: Settings) -> OutputDocument:  # noqa: ARG001
    spec = RemoveSpec(document=load_document_file(args.input_path), drop=args.pages)
    return deliverable(run_transform(spec))


def _run_reorder(args: argparse.Namespace, settings: Settings) -> OutputDocument:  # noqa: ARG001
    spec = ReorderSpec(document=load_document_file(args.input_path), order=args.order)
    return deliverable(run_transform(spec))


def _run_compress_image(args: argparse.Namespace, settings: Settings) -> CompressionResult:
    return compress_image(
        args.input_path.read_bytes(),
        name=args.input_path.name,
        quality=args.quality,
        target_bytes=_target_bytes(args),
        allow_oversize=args.allow_oversize or None,
        settings=settings,
    )


def _run_compress_pdf(args: argparse.Namespace, settings: Settings) -> CompressionResult:
    return compress_pdf(
        load_document_file(args.input_path),
        quality=args.quality,
        target_bytes=_target_bytes(args),
        lossless=args.lossless,
        preset=args.preset,
        strip_metadata=args.strip_metadata,
        allow_oversize=args.allow_oversize or None,
        settings=settings,
    )


_IMAGE_COMMANDS = frozenset({"compress-image"})

_COMMANDS: dict[str, Callable[[argparse.Namespace, Settings], OutputDocument | CompressionResult]] = {
    "merge": _run_merge,
    "split": _run_split,
    "extract": _run_extract,
    "remove": _run_remove,
    "reorder": _run_reorder,
    "compress-image": _run_compress_image,
    "compress-pdf": _run_compress_pdf,
}


def main(argv: list[str] | None = None) -> int:
    """Run the CLI.

    Args:
        argv (list[str] | None): Arguments; defaults to `sys.argv[1:]`.

    Returns:
        int: Exit code (0 for success, 1 for error).
    """
    settings = get_settings()
    configure_logging(settings=settings)

    parser = build_parser()
    args = parser.parse_args(argv)

    handler = _COMMANDS.get(args.command or "")
    if handler is None:
        parser.print_help()
        return 0

    try:
        if args.command in _IMAGE_COMMANDS:
            ensure_image_dependencies()
        else:
            ensure_document_dependencies()
        result = handler(args, settings)
    except PackageError:
        logger.exception("Command failed", extra={"command": args.command})
        return 1
    except KeyboardInterrupt:
        logger.info("Command aborted by user")
        return 130
    except Exception:
        logger.exception("Unexpected error", extra={"command": args.command})
        return 1

    output_path = args.output_path or Path(result.name)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(result.data)
    logger.info("Output written", extra={"output_path": str(output_path), "size_bytes": len(result.data)})
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
