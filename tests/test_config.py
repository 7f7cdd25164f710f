import logging
from pathlib import Path

from pinscraper.config import Credential, Settings
from pinscraper.events import LoggingEventSink, setup_logging


def test_settings_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("EMAIL", "me@example.com")
    monkeypatch.setenv("PASSWORD", "pw")
    monkeypatch.setenv("SCRAPER_WEBHOOK_URL", "https://hooks.example.com")
    monkeypatch.setenv("SCRAPER_WEBHOOK_TOKEN", "tok")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.delenv("LOG_DIR", raising=False)

    settings = Settings.from_env(str(tmp_path / "missing.env"))

    assert settings.credential == Credential("me@example.com", "pw")
    assert settings.webhook_url == "https://hooks.example.com"
    assert settings.webhook_token == "tok"
    assert settings.log_level == "DEBUG"
    assert settings.log_dir == Path("logs")


def test_settings_read_dotenv_file(monkeypatch, tmp_path):
    for name in ("EMAIL", "PASSWORD", "SCRAPER_WEBHOOK_URL"):
        # setenv first so teardown removes whatever the .env file loads
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    env_file = tmp_path / ".env"
    env_file.write_text("EMAIL=dot@example.com\nPASSWORD=dotpw\n")

    settings = Settings.from_env(str(env_file))

    assert settings.email == "dot@example.com"
    assert settings.webhook_url is None


def test_credential_repr_hides_secret():
    assert "hunter2" not in repr(Credential("me", "hunter2"))


def test_event_sink_levels(caplog):
    sink = LoggingEventSink(logging.getLogger("tests.events"))
    with caplog.at_level(logging.INFO, logger="tests.events"):
        sink.emit("page_completed", pages=1, collected=4)
        sink.emit("scroll_unit_failed", error="StallError")
        sink.emit("session_closed")

    assert [r.levelno for r in caplog.records] == [logging.INFO, logging.ERROR, logging.INFO]
    assert caplog.records[0].getMessage() == "page_completed pages=1 collected=4"
    assert caplog.records[2].getMessage() == "session_closed"


def test_setup_logging_writes_combined_and_error_files(tmp_path):
    logger = setup_logging(tmp_path, "INFO")
    try:
        logger.info("hello")
        logger.error("broken")
        for handler in logger.handlers:
            handler.flush()

        combined = (tmp_path / "combined.log").read_text()
        errors = (tmp_path / "error.log").read_text()
        assert "[INFO]: hello" in combined and "[ERROR]: broken" in combined
        assert "hello" not in errors and "[ERROR]: broken" in errors
    finally:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.propagate = True
