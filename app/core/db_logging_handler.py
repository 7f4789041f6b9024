# app/core/db_logging_handler.py
import logging
import traceback

class DatabaseHandler(logging.Handler):
    """
    Persists ERROR and CRITICAL log records as SystemAlert rows so that data and
    configuration defects (unknown categories, broken strategies) can be reviewed
    separately from ordinary word rejections.
    """
    def __init__(self, level=logging.ERROR):
        super().__init__(level)

    def emit(self, record: logging.LogRecord):
        if record.levelno < logging.ERROR:
            return
        # The alert writer logs its own failures; persisting those would recurse
        if record.name.startswith("app.crud.system"):
            return

        details = None
        if record.exc_info:
            details = "".join(traceback.format_exception(*record.exc_info))

        # Imported lazily: logging is configured before the database layer is importable
        from app.db.session import SessionLocal
        from app.crud import crud_system

        # Fresh session per record, handlers can fire from worker threads
        db = SessionLocal()
        try:
            crud_system.create_alert(
                db=db,
                level=record.levelname,
                message=record.getMessage(),
                details=details,
            )
        except Exception:
            self.handleError(record)
        finally:
            db.close()
