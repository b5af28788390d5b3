from libris.models.book import Book
from libris.models.borrow import Borrow
from libris.models.notification_log import NotificationLog
from libris.models.user import User

__all__ = ["Book", "Borrow", "NotificationLog", "User"]
