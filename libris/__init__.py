import os

from flask import Flask, jsonify, send_from_directory

from libris.config import Config
from libris.extensions import db, migrate, jwt, mail


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # 1) extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    mail.init_app(app)

    from libris import models  # noqa: F401  (registers tables on db.metadata)

    if app.config.get("AUTO_CREATE_TABLES"):
        with app.app_context():
            db.create_all()

    # 2) error handlers and CLI
    from libris.errors import register_error_handlers
    from libris.commands import register_commands
    register_error_handlers(app)
    register_commands(app)

    # 3) API blueprints
    from libris.controllers.auth_controller import auth_bp
    from libris.controllers.book_controller import book_bp
    from libris.controllers.borrow_controller import borrow_bp
    from libris.controllers.report_controller import report_bp
    from libris.controllers.notification_controller import notif_bp
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(book_bp, url_prefix="/books")
    app.register_blueprint(borrow_bp, url_prefix="/books")
    app.register_blueprint(report_bp, url_prefix="/books")
    app.register_blueprint(notif_bp, url_prefix="/notifications")

    @app.get("/uploads/<path:filename>")
    def uploaded_file(filename):
        return send_from_directory(os.path.abspath(app.config["UPLOAD_FOLDER"]), filename)

    @app.get("/health")
    def health():
        return jsonify({"ok": True})

    # 4) overdue reminders
    from libris.tasks.scheduler import start_scheduler
    start_scheduler(app)

    return app
