from sqlalchemy.orm import joinedload

from app.db import db
from app.models.post_model import Post


def create_post(author_id, content, media_url=None):
    post = Post(
        author_id=author_id,
        content=content,
        media_url=media_url,
    )
    db.session.add(post)
    db.session.flush()

    return post


def get_by_id(post_id: int):
    return (
        Post.query
        .options(joinedload(Post.author))
        .filter(Post.id == post_id)
        .first()
    )


def list_with_author():
    return (
        Post.query
        .options(joinedload(Post.author))
        .order_by(Post.created_at.desc(), Post.id.desc())
        .all()
    )


def update_post(post, **fields):
    for key, value in fields.items():
        setattr(post, key, value)
    db.session.flush()
    return post


def delete_post(post):
    db.session.delete(post)
    db.session.flush()


def count_by_author(author_id: int) -> int:
    return Post.query.filter_by(author_id=author_id).count()


def count_by_media_url(media_url: str) -> int:
    return Post.query.filter_by(media_url=media_url).count()
