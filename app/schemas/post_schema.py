from app.extensions.extensions import ma
from app.schemas.user_schema import UserResponseSchema


class PostResponseSchema(ma.Schema):
    id = ma.Int()
    content = ma.Str()
    media_url = ma.Str(data_key="mediaUrl", allow_none=True)
    author_id = ma.Int(data_key="authorId")
    created_at = ma.DateTime(data_key="createdAt")
    updated_at = ma.DateTime(data_key="updatedAt")
    author = ma.Nested(UserResponseSchema)


post_schema = PostResponseSchema()
posts_schema = PostResponseSchema(many=True)
