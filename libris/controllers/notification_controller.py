from flask import Blueprint, jsonify

from libris.models.user import ROLE_ADMIN
from libris.services.notification_service import NotificationService
from libris.utils.decorators import role_required

notif_bp = Blueprint("notifications", __name__)


@notif_bp.post("/run-overdue-check")
@role_required(ROLE_ADMIN)
def run_overdue_check():
    summary = NotificationService.check_overdue()
    return jsonify({"message": "Overdue check completed", **summary})
