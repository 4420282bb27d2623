import re

import pytest

from godis import logger
from godis.logger import LogLevel, Logger, Settings, open_log_file


def _log_files(directory):
    return [p for p in directory.iterdir() if p.is_file()]


def _make_settings(tmp_path, name="godis"):
    return Settings(path=str(tmp_path / "log"), name=name, ext="log")


def test_level_flags(tmp_path):
    with Logger(_make_settings(tmp_path)) as lg:
        for level in LogLevel:
            lg.output(level, f"m-{level.name}")
        lg.flush()
    lines = _log_files(tmp_path / "log")[0].read_text().splitlines()
    flags = [re.search(r"\[([A-Z]+)\]", line).group(1) for line in lines]
    assert flags == ["DEBUG", "INFO", "WARN", "ERROR", "FATAL"]


def test_open_log_file_creates_directory(tmp_path):
    directory = tmp_path / "a" / "b"
    f = open_log_file("x.log", str(directory))
    try:
        f.write("hello\n")
    finally:
        f.close()
    assert (directory / "x.log").read_text() == "hello\n"


def test_open_log_file_appends(tmp_path):
    for text in ("one\n", "two\n"):
        with open_log_file("x.log", str(tmp_path)) as f:
            f.write(text)
    assert (tmp_path / "x.log").read_text() == "one\ntwo\n"


def test_open_log_file_directory_is_a_file(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    with pytest.raises(OSError):
        open_log_file("x.log", str(blocker / "sub"))


def test_file_logger_writes_to_file(tmp_path):
    settings = _make_settings(tmp_path)
    with Logger(settings) as lg:
        lg.output(LogLevel.INFO, "hello file")
        lg.flush()
        files = _log_files(tmp_path / "log")
        assert len(files) == 1
        assert files[0].name.startswith("godis-")
        assert files[0].name.endswith(".log")
        content = files[0].read_text()
    assert "hello file" in content
    assert "[INFO][test_logger.py:" in content


def test_entry_has_timestamp_prefix(tmp_path):
    settings = _make_settings(tmp_path)
    with Logger(settings) as lg:
        lg.output(LogLevel.ERROR, "boom")
        lg.flush()
    content = _log_files(tmp_path / "log")[0].read_text()
    assert re.match(r"^\d{4}/\d{2}/\d{2} \d{2}:\d{2}:\d{2} \[ERROR\]", content)
    assert content.endswith("boom\n")


def test_entries_keep_order(tmp_path):
    settings = _make_settings(tmp_path)
    with Logger(settings) as lg:
        for i in range(50):
            lg.output(LogLevel.DEBUG, f"msg-{i}")
        lg.flush()
    lines = _log_files(tmp_path / "log")[0].read_text().splitlines()
    assert len(lines) == 50
    assert [line.rsplit(" ", 1)[1] for line in lines] == [f"msg-{i}" for i in range(50)]


def test_stdout_logger(capsys):
    lg = Logger()
    try:
        lg.output(LogLevel.WARNING, "to stdout")
        lg.flush()
    finally:
        lg.close()
    out = capsys.readouterr().out
    assert "[WARN]" in out
    assert "to stdout" in out


def test_output_after_close_raises(tmp_path):
    lg = Logger(_make_settings(tmp_path))
    lg.close()
    lg.close()
    with pytest.raises(RuntimeError):
        lg.output(LogLevel.INFO, "late")


def test_module_functions_use_default_logger(tmp_path):
    lg = logger.setup(_make_settings(tmp_path, name="mod"))
    logger.info("a", 1, "b")
    logger.infof("value=%d", 5)
    logger.warn("careful")
    logger.errorf("plain")
    logger.fatal("bad")
    logger.debug("dbg")
    lg.flush()
    content = _log_files(tmp_path / "log")[0].read_text()
    assert "a 1 b" in content
    assert "value=5" in content
    assert "[WARN]" in content and "careful" in content
    assert "[ERROR]" in content and "plain" in content
    assert "[FATAL]" in content and "bad" in content
    assert "[DEBUG]" in content and "dbg" in content
    assert content.count("[test_logger.py:") == 6