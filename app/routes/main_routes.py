from flask import Blueprint, current_app, jsonify, send_from_directory

from app.services.media_service import content_type_for


main_bp = Blueprint("main", __name__)


@main_bp.route("/", methods=["GET"])
def index():
    return jsonify({"status": "ok"}), 200


@main_bp.route("/uploads/<path:filename>", methods=["GET"])
def get_upload(filename: str):
    return send_from_directory(
        current_app.config["UPLOAD_FOLDER"],
        filename,
        mimetype=content_type_for(filename),
    )
