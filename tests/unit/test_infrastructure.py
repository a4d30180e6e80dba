"""Unit tests for database helpers and the audit log."""
import logging

from sqlalchemy import inspect
from sqlalchemy.orm import Session

from common import audit, database
from common.config import reset_settings_cache


class TestDatabase:
    """Test session and schema helpers."""

    def test_get_db_yields_and_closes_session(self):
        generator = database.get_db()
        session = next(generator)

        assert isinstance(session, Session)
        generator.close()

    def test_init_db_respects_flag(self, monkeypatch):
        database.Base.metadata.drop_all(bind=database.engine)
        monkeypatch.setattr(database.settings, "run_db_migrations", False)
        database.init_db()
        assert "bookings" not in inspect(database.engine).get_table_names()

        monkeypatch.setattr(database.settings, "run_db_migrations", True)
        database.init_db()
        assert {"users", "items", "bookings"} <= set(inspect(database.engine).get_table_names())


class TestAuditLog:
    """Test the booking transition audit file."""

    def test_transition_written_to_file(self, monkeypatch, tmp_path):
        monkeypatch.setenv("AUDIT_LOG_ENABLED", "true")
        monkeypatch.setenv("LOG_DIR", str(tmp_path))
        reset_settings_cache()
        logger = audit._build_logger("audit_unit")
        try:
            logger.info("approved | booking=%s | actor=%s", 3, 1)
            for handler in logger.handlers:
                handler.flush()

            content = (tmp_path / "audit_unit.log").read_text()
            assert "| INFO | approved | booking=3 | actor=1" in content
        finally:
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)
            reset_settings_cache()

    def test_disabled_audit_uses_null_handler(self):
        logger = audit._build_logger("audit_disabled")

        assert all(isinstance(handler, logging.NullHandler) for handler in logger.handlers)

    def test_audit_transition_formats_fields(self, caplog):
        with caplog.at_level(logging.INFO, logger="audit.bookings"):
            audit.audit_transition("created", 11, 4, item=2)

        assert "created | booking=11 | actor=4 | item=2" in caplog.text

    def test_unwritable_audit_log_only_warns(self, monkeypatch, caplog):
        def unwritable(name):
            raise PermissionError(f"logs/{name}.log")

        monkeypatch.setattr(audit, "_build_logger", unwritable)
        with caplog.at_level(logging.WARNING, logger="common.audit"):
            audit.audit_transition("approved", 12, 1)

        assert "approved of booking 12 not recorded" in caplog.text
