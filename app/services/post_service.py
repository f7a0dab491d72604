from flask import current_app

from app.db import db
from app.errors import AuthError, ForbiddenError, NotFoundError, ValidationError
from app.repositories import post_repository, user_repository
from app.schemas.post_schema import post_schema, posts_schema
from app.services.media_service import is_stored_upload, remove_media, store_upload


MAX_MEDIA_URL_LENGTH = 2048


def _validate_content(content):
    if not isinstance(content, str) or not content.strip():
        raise ValidationError("Content is required", code="MissingContent")
    return content.strip()


def _validate_media_url(media_url):
    if media_url is None:
        return None
    if not isinstance(media_url, str) or len(media_url) > MAX_MEDIA_URL_LENGTH:
        raise ValidationError(
            f"mediaUrl must be a string of at most {MAX_MEDIA_URL_LENGTH} characters",
            code="InvalidMediaUrl",
        )
    return media_url.strip() or None


def _release_media(media_url):
    # Another post may still point at the same upload.
    if is_stored_upload(media_url) and not post_repository.count_by_media_url(media_url):
        remove_media(media_url)


def _get_owned_post(requester_id: int, post_id: int):
    post = post_repository.get_by_id(post_id)
    if not post:
        raise NotFoundError("Post not found", code="PostNotFound")

    if post.author_id != requester_id:
        current_app.logger.warning(
            "User id=%s denied access to post id=%s owned by id=%s",
            requester_id,
            post.id,
            post.author_id,
        )
        raise ForbiddenError("You are not the author of this post", code="NotAuthor")

    return post


def create_post(author_id: int, content, media_url=None, media_file=None):
    content = _validate_content(content)
    media_url = _validate_media_url(media_url)

    if not user_repository.get_by_id(author_id):
        raise AuthError("User no longer exists", code="UserNotFound")

    if media_file is not None:
        media_url = store_upload(media_file)

    try:
        post = post_repository.create_post(author_id, content, media_url)
        db.session.commit()
    except Exception:
        db.session.rollback()
        if media_file is not None:
            remove_media(media_url)
        raise

    current_app.logger.info("User id=%s created post id=%s", author_id, post.id)
    return post_schema.dump(post)


def list_posts():
    return posts_schema.dump(post_repository.list_with_author())


def get_post(post_id: int):
    post = post_repository.get_by_id(post_id)
    if not post:
        raise NotFoundError("Post not found", code="PostNotFound")
    return post_schema.dump(post)


def update_post(requester_id: int, post_id: int, fields: dict, media_file=None):
    post = _get_owned_post(requester_id, post_id)

    changes = {}
    if "content" in fields:
        changes["content"] = _validate_content(fields["content"])
    if "mediaUrl" in fields:
        changes["media_url"] = _validate_media_url(fields["mediaUrl"])
    if media_file is not None:
        changes["media_url"] = store_upload(media_file)

    if not changes:
        raise ValidationError("At least one field is required", code="NothingToUpdate")

    previous_media_url = post.media_url
    try:
        post_repository.update_post(post, **changes)
        db.session.commit()
    except Exception:
        db.session.rollback()
        if media_file is not None:
            remove_media(changes["media_url"])
        raise

    if "media_url" in changes and previous_media_url != post.media_url:
        _release_media(previous_media_url)

    current_app.logger.info("User id=%s updated post id=%s", requester_id, post.id)
    return post_schema.dump(post)


def delete_post(requester_id: int, post_id: int):
    post = _get_owned_post(requester_id, post_id)
    media_url = post.media_url

    post_repository.delete_post(post)
    db.session.commit()

    _release_media(media_url)
    current_app.logger.info("User id=%s deleted post id=%s", requester_id, post_id)
