# libris/services/mail_service.py
from __future__ import annotations

from flask import current_app
from flask_mail import Message

from libris.extensions import mail
from libris.models.notification_log import NotificationLog
from libris.repositories.notification_repo import NotificationRepo
from libris.utils.dates import utcnow


class MailService:
    @staticmethod
    def send_email(to_email: str, subject: str, body: str) -> tuple[bool, str | None]:
        """
        return: (success, error_text)
        """
        try:
            msg = Message(subject=subject, recipients=[to_email], body=body)
            mail.send(msg)
            return True, None
        except Exception as e:
            # SMTP failures are recorded in the notification log, never raised
            current_app.logger.warning(f"[MailService] Could not send mail to {to_email}: {e}")
            return False, str(e)

    @staticmethod
    def log_notification(
        borrow_id: int,
        notif_type: str,
        to_email: str | None,
        message: str,
        success: bool,
        error: str | None = None,
    ) -> NotificationLog:
        return NotificationRepo.log(NotificationLog(
            borrow_id=borrow_id,
            type=notif_type,
            email=to_email,
            message=message,
            success=bool(success),
            error_message=error,
            sent_at=utcnow(),
        ))

    @staticmethod
    def send_overdue_mail(borrow) -> bool:
        """
        Sends the overdue reminder for one open borrow and logs the attempt.
        The caller commits.
        """
        user = borrow.user
        book = borrow.book
        to_email = user.email if user else None
        name = user.name if user else "reader"
        title = book.title if book else f"Book #{borrow.book_id}"

        if not to_email:
            MailService.log_notification(
                borrow_id=borrow.id,
                notif_type="overdue",
                to_email=None,
                message="User email not found",
                success=False,
                error="missing_email",
            )
            return False

        subject = "Library: overdue book reminder"
        body = (
            f"Hello {name},\n\n"
            f"'{title}' was due on {borrow.due_date:%Y-%m-%d %H:%M} UTC.\n"
            f"A late fee of {current_app.config['FINE_CURRENCY']}"
            f"{current_app.config['DAILY_FINE']} per started day applies on return.\n\n"
            f"Please return it as soon as possible.\n"
        )

        ok, err = MailService.send_email(to_email, subject, body)
        MailService.log_notification(
            borrow_id=borrow.id,
            notif_type="overdue",
            to_email=to_email,
            message="Mail sent" if ok else "Mail could not be sent",
            success=ok,
            error=err,
        )
        return ok
