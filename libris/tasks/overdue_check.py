from libris.extensions import db
from libris.services.notification_service import NotificationService


def run_overdue_check_job(app):
    """Scheduler entry point: one overdue-reminder pass inside an app context."""
    with app.app_context():
        try:
            return NotificationService.check_overdue()
        except Exception as e:
            db.session.rollback()
            app.logger.exception(f"[overdue] Job failed: {e}")
            return None
