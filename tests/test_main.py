"""
Command Line Tests
==================

Tests for argument validation, error reporting and exit codes.
"""

import io
from pathlib import Path

import pytest

from gifpace.codec.errors import DecodingIoError, EncodingError, FormatError
from gifpace.main import USAGE, UsageError, describe_error, main, parse_args


class TestParseArgs:
    """Tests for command line validation."""

    def test_single_gif_path(self):
        """Verify one .gif path is accepted."""
        assert parse_args(["anims/cat.gif"]) == Path("anims/cat.gif")

    @pytest.mark.parametrize(
        "argv",
        [
            [],
            ["a.gif", "b.gif"],
            ["a.png"],
            ["a.GIF"],
            ["gif"],
            [".gif"],
            ["-h"],
        ],
    )
    def test_usage_errors(self, argv):
        """Verify anything but exactly one .gif path is a usage error."""
        with pytest.raises(UsageError) as exc_info:
            parse_args(argv)
        assert str(exc_info.value) == USAGE


class TestDescribeError:
    """Tests for error messages."""

    def test_messages(self):
        """Verify each error kind is reported its own way."""
        assert describe_error(UsageError()) == USAGE
        assert describe_error(FormatError("malformed GIF header")) == (
            "gif decoding error: malformed GIF header"
        )
        assert describe_error(DecodingIoError(OSError("disk gone"))) == "disk gone"
        assert describe_error(EncodingError("bad delay")) == "gif encoding error: bad delay"
        assert describe_error(FileNotFoundError(2, "No such file or directory", "x.gif")) == (
            "[Errno 2] No such file or directory: 'x.gif'"
        )


class TestMain:
    """Tests for the entry point."""

    def test_usage_exit_code(self, capsys):
        """Verify wrong arguments exit non-zero with the usage message."""
        out = io.BytesIO()
        assert main([], stdout=out) == 1
        assert main(["one.gif", "two.gif"], stdout=out) == 1
        assert main(["image.png"], stdout=out) == 1

        assert out.getvalue() == b""
        assert capsys.readouterr().err.splitlines() == [USAGE] * 3

    def test_missing_file(self, tmp_path, capsys):
        """Verify an unreadable source exits non-zero."""
        assert main([str(tmp_path / "missing.gif")], stdout=io.BytesIO()) == 1
        assert "No such file" in capsys.readouterr().err

    def test_decode_error(self, tmp_path, capsys):
        """Verify malformed input is reported as a decoding error."""
        path = tmp_path / "broken.gif"
        path.write_bytes(b"GIF89a\x01")

        assert main([str(path)], stdout=io.BytesIO()) == 1
        assert capsys.readouterr().err.startswith("gif decoding error:")

    def test_uniform_input_succeeds_silently(self, write_gif, make_frame):
        """Verify already uniform input exits 0 without output."""
        path = write_gif([make_frame(delay=4), make_frame(delay=4)])
        out = io.BytesIO()

        assert main([path], stdout=out) == 0
        assert out.getvalue() == b""

    def test_rewrites_to_stdout(self, write_gif, make_frame):
        """Verify mixed delays produce a GIF on stdout."""
        path = write_gif([make_frame(delay=4), make_frame(delay=6)])
        out = io.BytesIO()

        assert main([path], stdout=out) == 0
        assert out.getvalue().startswith(b"GIF89a")
        assert out.getvalue().endswith(b"\x3b")
