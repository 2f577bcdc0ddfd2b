"""Tests for CLI argument parsing and commands."""

import json
import os
import tempfile
from pathlib import Path

import pikepdf
import pytest

from pdfmarkup.cli import _parse_page_list, _parse_rotations, build_parser, main


class TestParseHelpers:
    def test_page_list_keeps_order(self):
        assert _parse_page_list("3, 1,2") == [3, 1, 2]

    def test_page_list_ignores_empty_parts(self):
        assert _parse_page_list("1,,2,") == [1, 2]

    def test_page_list_invalid(self):
        with pytest.raises(ValueError):
            _parse_page_list("1,a")

    def test_rotations(self):
        assert _parse_rotations("1:90, 3:180") == {1: 90, 3: 180}

    def test_rotations_invalid(self):
        with pytest.raises(ValueError):
            _parse_rotations("1-90")


class TestParser:
    def test_export_arguments(self):
        args = build_parser().parse_args(
            ["export", "in.pdf", "-o", "out.pdf", "--order", "2,1", "--rotate", "1:90", "--delete", "3"]
        )
        assert args.command == "export"
        assert args.input == Path("in.pdf")
        assert args.output == Path("out.pdf")
        assert args.order == "2,1"

    def test_export_requires_output(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["export", "in.pdf"])

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out.lower()


class TestCommands:
    def _write_pdf(self, tmp_dir, data):
        path = os.path.join(tmp_dir, "in.pdf")
        with open(path, "wb") as f:
            f.write(data)
        return path

    def test_info(self, pdf_bytes, capsys):
        with tempfile.TemporaryDirectory() as d:
            assert main(["info", self._write_pdf(d, pdf_bytes)]) == 0
        out = capsys.readouterr().out
        assert "Pages:      3" in out
        assert "Page 3: 612.0 x 792.0 pt" in out

    def test_missing_input(self, capsys):
        assert main(["info", "/nonexistent/file.pdf"]) == 1
        assert "not found" in capsys.readouterr().err

    def test_export_with_markup_and_page_changes(self, pdf_bytes):
        with tempfile.TemporaryDirectory() as d:
            source = self._write_pdf(d, pdf_bytes)
            markup_path = os.path.join(d, "markup.json")
            with open(markup_path, "w") as f:
                json.dump(
                    {"markup": [{"kind": "text", "id": "t", "page": 3, "x": 72, "y": 72, "content": "Hello"}]}, f
                )
            output = os.path.join(d, "out", "result.pdf")

            code = main(
                [
                    "export",
                    source,
                    "-o",
                    output,
                    "--markup",
                    markup_path,
                    "--rotate",
                    "3:90",
                    "--delete",
                    "2",
                    "--order",
                    "3,1",
                ]
            )
            assert code == 0

            with pikepdf.open(output) as pdf:
                assert len(pdf.pages) == 2
                first = pdf.pages[0]
                assert int(first.obj.Rotate) == 90
                strings = [
                    str(instr.operands[0])
                    for instr in pikepdf.parse_content_stream(first)
                    if str(instr.operator) == "Tj"
                ]
                assert strings == ["Page 3", "Hello"]

    def test_export_bad_markup_kind(self, pdf_bytes, capsys):
        with tempfile.TemporaryDirectory() as d:
            source = self._write_pdf(d, pdf_bytes)
            markup_path = os.path.join(d, "markup.json")
            with open(markup_path, "w") as f:
                json.dump([{"kind": "star", "id": "s", "page": 1, "x": 0, "y": 0}], f)
            code = main(["export", source, "-o", os.path.join(d, "out.pdf"), "--markup", markup_path])
        assert code == 1
        assert "Invalid input" in capsys.readouterr().err

    def test_export_unreadable_input(self, capsys):
        with tempfile.TemporaryDirectory() as d:
            source = self._write_pdf(d, b"definitely not a pdf")
            assert main(["export", source, "-o", os.path.join(d, "out.pdf")]) == 1
        assert "Could not load document" in capsys.readouterr().err

    def test_export_with_bad_config(self, pdf_bytes, capsys):
        with tempfile.TemporaryDirectory() as d:
            source = self._write_pdf(d, pdf_bytes)
            config_path = os.path.join(d, "settings.json")
            with open(config_path, "w") as f:
                json.dump({"version": 1, "defaults": {"text": {"font_size": "big"}}}, f)
            code = main(["--config", config_path, "export", source, "-o", os.path.join(d, "out.pdf")])
        assert code == 1
        assert "Configuration error for 'defaults.text.font_size'" in capsys.readouterr().err

    def test_version(self, capsys):
        with pytest.raises(SystemExit):
            main(["--version"])
        assert "1.0.0" in capsys.readouterr().out
