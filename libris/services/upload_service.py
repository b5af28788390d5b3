import os
import time

from flask import current_app
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from libris.errors import ValidationError

PUBLIC_PREFIX = "/uploads/"


class UploadService:
    @staticmethod
    def _allowed(filename: str) -> bool:
        ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
        return ext in current_app.config["ALLOWED_IMAGE_EXTENSIONS"]

    @staticmethod
    def save_cover(file: FileStorage) -> str:
        """Stores an uploaded cover and returns its public path (/uploads/<name>)."""
        filename = secure_filename(file.filename or "")
        if not filename or not UploadService._allowed(filename):
            raise ValidationError("Cover image must be a jpg, jpeg, png, gif or webp file")

        folder = current_app.config["UPLOAD_FOLDER"]
        os.makedirs(folder, exist_ok=True)

        stored_name = f"{int(time.time() * 1000)}-{filename}"
        file.save(os.path.join(folder, stored_name))
        current_app.logger.debug(f"[upload] Saved cover {stored_name}")
        return PUBLIC_PREFIX + stored_name

    @staticmethod
    def disk_path(public_path: str):
        if not public_path or not public_path.startswith(PUBLIC_PREFIX):
            return None
        name = secure_filename(public_path[len(PUBLIC_PREFIX):])
        if not name:
            return None
        return os.path.join(current_app.config["UPLOAD_FOLDER"], name)

    @staticmethod
    def discard(public_path: str) -> bool:
        path = UploadService.disk_path(public_path)
        if path and os.path.exists(path):
            os.remove(path)
            current_app.logger.info(f"[upload] Removed cover {public_path}")
            return True
        return False
