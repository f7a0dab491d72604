from app.extensions.extensions import ma


class CredentialsSchema(ma.Schema):
    email = ma.Email(required=True)
    password = ma.Str(required=True)


class UserResponseSchema(ma.Schema):
    id = ma.Int()
    email = ma.Str()
