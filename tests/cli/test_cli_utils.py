"""
Unit tests for CLI utilities.
"""

import io

from zigswitch.cli.utils import make_progress_printer, print_error
from zigswitch.core.download import DownloadProgress


class FakeTTY(io.StringIO):
    def isatty(self):
        return True


def test_progress_printer_disabled_without_tty():
    assert make_progress_printer(io.StringIO()) is None


def test_progress_printer_redraws_line():
    stream = FakeTTY()
    on_progress = make_progress_printer(stream)

    on_progress(DownloadProgress(512, 1024, 50.0, 1024, 0.5))
    on_progress(DownloadProgress(1024, 1024, 100.0, 1024, 0))

    output = stream.getvalue()
    assert output.count("\r") == 2
    assert "(50.0%)" in output
    assert output.endswith("\n")


def test_print_error(capsys):
    print_error("Checksum mismatch", details="run again")

    err = capsys.readouterr().err
    assert "ERROR: Checksum mismatch" in err
    assert "  run again" in err
