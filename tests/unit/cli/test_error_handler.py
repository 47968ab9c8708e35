import logging

from ssoconfig.cli.error_handler import ErrorHandler, setup_logging


def test_log_error_records_history(caplog):
    handler = ErrorHandler()

    with caplog.at_level(logging.ERROR, logger="ssoconfig.error_handler"):
        handler.log_error("could not write", error_type="file", context={"path": "/tmp/config"})

    history = handler.get_error_history()
    assert len(history) == 1
    assert history[0]["message"] == "could not write"
    assert history[0]["type"] == "file"
    assert history[0]["context"] == {"path": "/tmp/config"}
    assert "file error: could not write" in caplog.text


def test_get_error_history_limit():
    handler = ErrorHandler()
    for i in range(3):
        handler.log_error(f"error {i}")

    assert [e["message"] for e in handler.get_error_history(limit=2)] == ["error 1", "error 2"]


def test_setup_logging_writes_errors_to_file(tmp_path):
    log_file = tmp_path / "logs" / "ssoconfig.log"
    logger = setup_logging("INFO", log_file)

    logging.getLogger("ssoconfig.session_manager").error("write failed")
    logging.getLogger("ssoconfig.session_manager").info("not in file")
    for handler in logger.handlers:
        handler.flush()

    content = log_file.read_text()
    assert "write failed" in content
    assert "not in file" not in content


def test_setup_logging_replaces_handlers():
    setup_logging("INFO")
    logger = setup_logging("DEBUG")

    assert len(logger.handlers) == 1
    assert logger.handlers[0].level == logging.DEBUG
