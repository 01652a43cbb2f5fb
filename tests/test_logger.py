# File: tests/test_logger.py
import logging

from vgo2nix.logger import LOGGER_NAME, configure


def test_progress_to_stdout_problems_to_stderr(capsys):
    lg = configure(level="INFO", log_format="%(levelname)s %(message)s")
    lg.debug("hidden")
    lg.info("Fetching github.com/pkg/errors@v0.9.1")
    lg.error("Encountered error: boom")

    captured = capsys.readouterr()
    assert captured.out == "INFO Fetching github.com/pkg/errors@v0.9.1\n"
    assert captured.err == "ERROR Encountered error: boom\n"


def test_log_file_receives_everything(tmp_path, capsys):
    log_file = tmp_path / "vgo2nix.log"
    lg = configure(level="DEBUG", log_file=log_file, log_format="%(message)s")
    lg.debug("goPackagePath a has rev v1")
    lg.warning("Skipping b")
    for handler in lg.handlers:
        handler.flush()

    assert log_file.read_text(encoding="utf-8").splitlines() == ["goPackagePath a has rev v1", "Skipping b"]
    capsys.readouterr()


def test_reconfigure_replaces_handlers():
    configure()
    lg = configure(level=logging.WARNING)
    assert lg is logging.getLogger(LOGGER_NAME)
    assert len(lg.handlers) == 2
    assert lg.level == logging.WARNING
    assert lg.propagate is False
