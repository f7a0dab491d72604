from flask import Blueprint, request, jsonify

from app.errors import ApiError, error_response
from app.services import auth_service


user_bp = Blueprint("users", __name__)


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None
    return data


@user_bp.route("/register", methods=["POST"])
def register():
    data = _json_body()
    if data is None:
        return jsonify({"error": "Invalid JSON body", "code": "InvalidBody"}), 400

    try:
        user = auth_service.register(
            data.get("email"),
            data.get("password"),
        )
        return jsonify(user), 201
    except ApiError as e:
        return error_response(e)


@user_bp.route("/login", methods=["POST"])
def login():
    data = _json_body()
    if data is None:
        return jsonify({"error": "Invalid JSON body", "code": "InvalidBody"}), 400

    try:
        token = auth_service.login(
            data.get("email"),
            data.get("password")
        )
        return jsonify({"message": "Login successful", "token": token}), 200
    except ApiError as e:
        return error_response(e)
