import mimetypes
import os
import time

from flask import current_app
from minio.error import S3Error
from werkzeug.utils import secure_filename

from app.errors import MediaStorageError, ValidationError
from app.extensions import minio_client
from app.extensions.minio_client import get_minio_client


ALLOWED_IMAGE_MIME_TYPES = {
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
}

ALLOWED_VIDEO_MIME_TYPES = {
    "video/mp4",
    "video/quicktime",
}


def content_type_for(filename: str) -> str:
    if filename.lower().endswith(".mp4"):
        return "video/mp4"
    guessed, _ = mimetypes.guess_type(filename)
    return guessed or "application/octet-stream"


def build_upload_filename(original_name: str) -> str:
    safe_name = secure_filename(original_name or "") or "upload"
    return f"{int(time.time() * 1000)}-{safe_name}"


def _validated_mimetype(file_storage) -> str:
    if not getattr(file_storage, "filename", ""):
        raise ValidationError("Media file is required", code="MissingMedia")

    mimetype = (getattr(file_storage, "mimetype", None) or "").lower()
    if mimetype in ("", "application/octet-stream"):
        mimetype = content_type_for(file_storage.filename)
    if mimetype.startswith("video/") and file_storage.filename.lower().endswith(".mp4"):
        mimetype = "video/mp4"

    if mimetype not in ALLOWED_IMAGE_MIME_TYPES | ALLOWED_VIDEO_MIME_TYPES:
        raise ValidationError(
            f"Unsupported media type: {mimetype}",
            code="UnsupportedMediaType",
        )
    return mimetype


def _get_stream_and_length(file_storage):
    stream = getattr(file_storage, "stream", file_storage)
    try:
        stream.seek(0, 2)
        length = stream.tell()
        stream.seek(0)
        return stream, length
    except (AttributeError, OSError):
        return stream, -1


def _store_locally(file_storage, filename: str) -> str:
    upload_folder = current_app.config["UPLOAD_FOLDER"]
    os.makedirs(upload_folder, exist_ok=True)

    try:
        file_storage.stream.seek(0)
    except (AttributeError, OSError):
        pass

    file_storage.save(os.path.join(upload_folder, filename))
    prefix = current_app.config["UPLOAD_URL_PREFIX"].rstrip("/")
    return f"{prefix}/{filename}"


def _store_in_minio(file_storage, filename: str, mimetype: str) -> str:
    minio = get_minio_client()
    bucket = current_app.config["MINIO_BUCKET"]
    minio_client.ensure_bucket(minio, bucket)

    object_name = minio_client.upload_object_name(filename)
    stream, length = _get_stream_and_length(file_storage)
    upload_kwargs = {
        "bucket_name": bucket,
        "object_name": object_name,
        "data": stream,
        "length": length,
        "content_type": mimetype,
    }
    if length == -1:
        upload_kwargs["part_size"] = 10 * 1024 * 1024

    minio.put_object(**upload_kwargs)
    return minio_client.public_object_url(object_name)


def store_upload(file_storage) -> str:
    """Persist an uploaded file and return the URL it is reachable at."""
    mimetype = _validated_mimetype(file_storage)
    filename = build_upload_filename(file_storage.filename)

    if minio_client.is_enabled():
        try:
            url = _store_in_minio(file_storage, filename, mimetype)
            current_app.logger.info("Stored upload %s in MinIO", filename)
            return url
        except Exception as e:
            if not current_app.config.get("MEDIA_LOCAL_FALLBACK_ENABLED", True):
                current_app.logger.error("MinIO upload of %s failed: %s", filename, e)
                raise MediaStorageError() from e
            current_app.logger.warning(
                "MinIO upload of %s failed, storing locally: %s", filename, e
            )

    try:
        url = _store_locally(file_storage, filename)
    except OSError as e:
        current_app.logger.error("Local upload of %s failed: %s", filename, e)
        raise MediaStorageError() from e

    current_app.logger.info("Stored upload %s on disk", filename)
    return url


def _local_path_for(media_url: str):
    prefix = current_app.config["UPLOAD_URL_PREFIX"].rstrip("/") + "/"
    if not media_url.startswith(prefix):
        return None

    filename = media_url[len(prefix):]
    if not filename or filename != secure_filename(filename):
        return None
    return os.path.join(current_app.config["UPLOAD_FOLDER"], filename)


def _minio_object_for(media_url: str):
    # Only a MinIO-backed deployment can have created objects in the bucket.
    if not minio_client.is_enabled():
        return None
    return minio_client.object_name_from_url(media_url)


def is_stored_upload(media_url) -> bool:
    if not media_url:
        return False
    return _local_path_for(media_url) is not None or _minio_object_for(media_url) is not None


def remove_media(media_url):
    """Best-effort removal of a stored upload; foreign URLs are left alone."""
    if not media_url:
        return

    local_path = _local_path_for(media_url)
    if local_path is not None:
        try:
            os.remove(local_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            current_app.logger.warning("Could not remove %s: %s", local_path, e)
        return

    object_name = _minio_object_for(media_url)
    if object_name is None:
        return

    try:
        get_minio_client().remove_object(current_app.config["MINIO_BUCKET"], object_name)
    except S3Error as e:
        if e.code not in {"NoSuchKey", "NoSuchBucket", "NoSuchObject"}:
            current_app.logger.warning("Could not remove %s: %s", object_name, e)
    except Exception as e:
        current_app.logger.warning("Could not remove %s: %s", object_name, e)
