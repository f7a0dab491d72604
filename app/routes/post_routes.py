from flask import Blueprint, request, jsonify

from app.errors import ApiError, ValidationError, error_response
from app.middleware.auth_gate import auth_required, get_current_user
from app.services import post_service


post_bp = Blueprint("posts", __name__)

POST_FIELDS = ("content", "mediaUrl")


def _read_post_payload():
    """Return ``(fields, media_file)`` from a JSON or multipart request."""
    content_type = (request.content_type or "").lower()

    if "multipart/form-data" in content_type:
        fields = {key: request.form.get(key) for key in POST_FIELDS if key in request.form}
        if fields.get("mediaUrl") == "":
            fields["mediaUrl"] = None
        media = request.files.get("media")
        # A blank file input still arrives as a part with an empty filename.
        if media is not None and not media.filename:
            media = None
        return fields, media

    if request.is_json:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Invalid JSON body", code="InvalidBody")
        return {key: data[key] for key in POST_FIELDS if key in data}, None

    raise ValidationError(
        "Body must be application/json or multipart/form-data",
        code="UnsupportedContentType",
    )


@post_bp.route("/posts", methods=["POST"])
@auth_required
def create_post():
    user = get_current_user()

    try:
        fields, media = _read_post_payload()
        post = post_service.create_post(
            user["id"],
            fields.get("content"),
            media_url=fields.get("mediaUrl"),
            media_file=media,
        )
        return jsonify({"message": "Post created", "post": post}), 201
    except ApiError as e:
        return error_response(e)


@post_bp.route("/posts", methods=["GET"])
def list_posts():
    return jsonify(post_service.list_posts()), 200


@post_bp.route("/posts/<int:post_id>", methods=["GET"])
def get_post(post_id):
    try:
        return jsonify(post_service.get_post(post_id)), 200
    except ApiError as e:
        return error_response(e)


@post_bp.route("/posts/<int:post_id>", methods=["PUT"])
@auth_required
def update_post(post_id):
    user = get_current_user()

    try:
        fields, media = _read_post_payload()
        post = post_service.update_post(user["id"], post_id, fields, media_file=media)
        return jsonify({"message": "Post updated", "post": post}), 200
    except ApiError as e:
        return error_response(e)


@post_bp.route("/posts/<int:post_id>", methods=["DELETE"])
@auth_required
def delete_post(post_id):
    user = get_current_user()

    try:
        post_service.delete_post(user["id"], post_id)
        return jsonify({"message": "Post deleted"}), 200
    except ApiError as e:
        return error_response(e)
