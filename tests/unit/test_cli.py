from __future__ import annotations

import zipfile
from typing import TYPE_CHECKING

import pytest

from pagesmith import cli
from pagesmith.settings import Settings

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture(autouse=True)
def _plain_settings(mocker) -> Settings:
    settings = Settings(log_json=False, quality_start=30, quality_floor=10, quality_step=10, pdf_raster_dpi=72)
    mocker.patch("pagesmith.cli.get_settings", return_value=settings)
    return settings


def test_build_parser_supports_version_flag(capsys) -> None:
    parser = cli.build_parser()

    with pytest.raises(SystemExit) as exc_info:
        parser.parse_args(["--version"])
    assert exc_info.value.code == 0

    captured = capsys.readouterr()
    assert "0.1.0" in captured.out


def test_compression_options_are_mutually_exclusive() -> None:
    parser = cli.build_parser()

    with pytest.raises(SystemExit) as exc_info:
        parser.parse_args(["compress-pdf", "in.pdf", "--quality", "50", "--lossless"])
    assert exc_info.value.code == 2


def test_compression_requires_a_mode() -> None:
    parser = cli.build_parser()

    with pytest.raises(SystemExit):
        parser.parse_args(["compress-image", "in.jpg"])


def test_target_kb_must_be_positive() -> None:
    parser = cli.build_parser()

    with pytest.raises(SystemExit):
        parser.parse_args(["compress-image", "in.jpg", "--target-kb", "0"])


def test_main_without_command_prints_help(capsys) -> None:
    assert cli.main([]) == 0
    assert "usage" in capsys.readouterr().out.lower()


def test_main_extracts_pages(make_pdf, page_texts, tmp_path: Path) -> None:
    source = tmp_path / "input.pdf"
    source.write_bytes(make_pdf(4))
    output = tmp_path / "out" / "picked.pdf"

    result = cli.main(["extract", str(source), "--pages", "4,2", "--output", str(output)])

    assert result == 0
    assert page_texts(output.read_bytes()) == ["Page 2", "Page 4"]


def test_main_split_writes_default_archive(make_pdf, tmp_path: Path, monkeypatch) -> None:
    source = tmp_path / "input.pdf"
    source.write_bytes(make_pdf(4))
    monkeypatch.chdir(tmp_path)

    result = cli.main(["split", str(source), "--range", "1-2", "--range", "3-4"])

    assert result == 0
    with zipfile.ZipFile(tmp_path / "split-documents.zip") as archive:
        assert archive.namelist() == ["document-part-1.pdf", "document-part-2.pdf"]


def test_main_reports_validation_errors(make_pdf, tmp_path: Path) -> None:
    source = tmp_path / "input.pdf"
    source.write_bytes(make_pdf(3))
    output = tmp_path / "organized.pdf"

    result = cli.main(["reorder", str(source), "--order", "1,1,2", "--output", str(output)])

    assert result == 1
    assert not output.exists()


def test_main_compresses_image_to_target(make_image, tmp_path: Path) -> None:
    source = tmp_path / "photo.jpg"
    source.write_bytes(make_image("JPEG"))
    output = tmp_path / "small.jpg"

    result = cli.main(["compress-image", str(source), "--target-kb", "500", "--output", str(output)])

    assert result == 0
    assert 0 < output.stat().st_size <= 500 * 1024


def test_main_fails_on_unreachable_target_without_oversize(make_image, tmp_path: Path) -> None:
    source = tmp_path / "photo.jpg"
    source.write_bytes(make_image("JPEG", size=(400, 400)))
    output = tmp_path / "small.jpg"

    result = cli.main(["compress-image", str(source), "--target-kb", "1", "--output", str(output)])

    assert result == 1
    assert not output.exists()


def test_main_keeps_oversized_result_when_allowed(make_image, tmp_path: Path) -> None:
    source = tmp_path / "photo.jpg"
    source.write_bytes(make_image("JPEG", size=(400, 400)))
    output = tmp_path / "small.jpg"

    result = cli.main(
        ["compress-image", str(source), "--target-kb", "1", "--allow-oversize", "--output", str(output)],
    )

    assert result == 0
    assert output.stat().st_size > 1024


def test_main_returns_130_on_keyboard_interrupt(mocker) -> None:
    handler = mocker.Mock(side_effect=KeyboardInterrupt)
    mocker.patch.dict("pagesmith.cli._COMMANDS", {"merge": handler})

    assert cli.main(["merge", "a.pdf", "b.pdf"]) == 130


def test_preset_excludes_quality() -> None:
    parser = cli.build_parser()

    with pytest.raises(SystemExit) as exc_info:
        parser.parse_args(["compress-pdf", "in.pdf", "--quality", "50", "--preset", "low"])
    assert exc_info.value.code == 2


def test_main_compresses_pdf_with_preset(make_pdf, page_texts, tmp_path: Path, mocker) -> None:
    source = tmp_path / "input.pdf"
    source.write_bytes(make_pdf(2))
    output = tmp_path / "packed.pdf"
    compress_pdf = mocker.spy(cli, "compress_pdf")

    result = cli.main(
        ["compress-pdf", str(source), "--preset", "maximum", "--strip-metadata", "--output", str(output)],
    )

    assert result == 0
    assert page_texts(output.read_bytes()) == ["Page 1", "Page 2"]
    assert compress_pdf.call_args.kwargs["preset"] == "maximum"
    assert compress_pdf.call_args.kwargs["strip_metadata"] is True


def test_image_commands_do_not_need_pymupdf(make_image, tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr("pagesmith.dependencies._is_module_available", lambda module_name: module_name != "fitz")
    source = tmp_path / "photo.png"
    source.write_bytes(make_image("PNG"))
    output = tmp_path / "small.png"

    result = cli.main(["compress-image", str(source), "--quality", "50", "--output", str(output)])

    assert result == 0
    assert output.exists()


def test_document_commands_fail_without_pymupdf(make_pdf, tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr("pagesmith.dependencies._is_module_available", lambda module_name: module_name != "fitz")
    source = tmp_path / "input.pdf"
    source.write_bytes(make_pdf(2))
    output = tmp_path / "picked.pdf"

    result = cli.main(["extract", str(source), "--pages", "1", "--output", str(output)])

    assert result == 1
    assert not output.exists()


def test_image_commands_fail_without_pillow(make_image, tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr("pagesmith.dependencies._is_module_available", lambda module_name: module_name != "PIL")
    source = tmp_path / "photo.png"
    source.write_bytes(make_image("PNG"))

    assert cli.main(["compress-image", str(source), "--quality", "50"]) == 1
