from flask import current_app

from libris.repositories.borrow_repo import BorrowRepo
from libris.repositories.notification_repo import NotificationRepo
from libris.services.mail_service import MailService
from libris.utils.dates import utcnow


class NotificationService:
    @staticmethod
    def check_overdue(now=None) -> dict:
        now = now or utcnow()
        overdue = BorrowRepo.find_overdue(now)

        sent = failed = skipped = 0
        for b in overdue:
            if NotificationRepo.already_sent(b.id, "overdue"):
                skipped += 1
                continue
            if MailService.send_overdue_mail(b):
                sent += 1
            else:
                failed += 1

        BorrowRepo.commit()

        summary = {"overdue": len(overdue), "sent": sent, "failed": failed, "skipped": skipped}
        current_app.logger.info(
            f"[overdue] overdue={summary['overdue']} sent={sent} failed={failed} skipped={skipped}"
        )
        return summary
