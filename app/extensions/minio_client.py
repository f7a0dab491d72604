from threading import Lock

import urllib3
from flask import current_app
from minio import Minio


UPLOAD_OBJECT_PREFIX = "uploads/"

_cached = {"client": None, "endpoint": None}
_lock = Lock()


def _endpoint_settings(config):
    return (
        config["MINIO_ENDPOINT"],
        config["MINIO_ACCESS_KEY"],
        config["MINIO_SECRET_KEY"],
        config["MINIO_SECURE"],
        config["MINIO_CONNECT_TIMEOUT"],
        config["MINIO_READ_TIMEOUT"],
        config.get("MINIO_HTTP_POOL_MAXSIZE", 32),
    )


def _build_client(config):
    endpoint, access_key, secret_key, secure, connect, read, pool_size = (
        _endpoint_settings(config)
    )
    return Minio(
        endpoint,
        access_key=access_key,
        secret_key=secret_key,
        secure=secure,
        http_client=urllib3.PoolManager(
            timeout=urllib3.Timeout(connect=connect, read=read),
            retries=False,
            maxsize=pool_size,
        ),
    )


def get_minio_client():
    """Return the shared MinIO client for the current app's settings."""
    settings = _endpoint_settings(current_app.config)
    with _lock:
        if _cached["client"] is None or _cached["endpoint"] != settings:
            _cached["client"] = _build_client(current_app.config)
            _cached["endpoint"] = settings
        return _cached["client"]


def is_enabled() -> bool:
    return current_app.config.get("MEDIA_STORAGE", "local") == "minio"


def ensure_bucket(client, bucket: str):
    if not client.bucket_exists(bucket):
        client.make_bucket(bucket)


def _bucket_url() -> str:
    base_url = current_app.config["MINIO_PUBLIC_BASE_URL"].rstrip("/")
    return f"{base_url}/{current_app.config['MINIO_BUCKET']}/"


def upload_object_name(filename: str) -> str:
    return f"{UPLOAD_OBJECT_PREFIX}{filename}"


def public_object_url(object_name: str) -> str:
    return f"{_bucket_url()}{object_name}"


def object_name_from_url(url: str):
    """Map a public URL back to an upload object, or None if it is not one."""
    bucket_url = _bucket_url()
    if not url.startswith(bucket_url):
        return None

    object_name = url[len(bucket_url):]
    if not object_name.startswith(UPLOAD_OBJECT_PREFIX) or ".." in object_name:
        return None
    return object_name
