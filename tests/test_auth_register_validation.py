import os
import tempfile
import unittest


class TestAuthRegisterValidation(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        db_fd, cls.db_path = tempfile.mkstemp(suffix=".db")
        os.close(db_fd)
        os.environ["JWT_SECRET_KEY"] = "test-secret"

        from app import create_app
        from app.db import db

        cls.app = create_app({
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{cls.db_path}",
            "JWT_SECRET_KEY": "test-secret",
        })
        cls.db = db
        cls.client = cls.app.test_client()

    @classmethod
    def tearDownClass(cls):
        with cls.app.app_context():
            cls.db.engine.dispose()
        if os.path.exists(cls.db_path):
            os.remove(cls.db_path)

    def setUp(self):
        with self.app.app_context():
            self.db.drop_all()
            self.db.create_all()

    def test_register_rejects_missing_password(self):
        response = self.client.post(
            "/api/users/register",
            json={"email": "user@example.com"}
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["code"], "MissingCredentials")

    def test_register_rejects_missing_email(self):
        response = self.client.post(
            "/api/users/register",
            json={"password": "pass123"}
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["code"], "MissingCredentials")

    def test_register_rejects_blank_password(self):
        response = self.client.post(
            "/api/users/register",
            json={"email": "user@example.com", "password": "   "}
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["code"], "MissingCredentials")

    def test_register_rejects_invalid_email(self):
        response = self.client.post(
            "/api/users/register",
            json={"email": "not-an-email", "password": "pass123"}
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["code"], "InvalidEmail")

    def test_register_rejects_invalid_json(self):
        response = self.client.post(
            "/api/users/register",
            data="not-json",
            headers={"Content-Type": "application/json"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["error"], "Invalid JSON body")

    def test_register_never_returns_password_hash(self):
        response = self.client.post(
            "/api/users/register",
            json={"email": "user@example.com", "password": "pass123"}
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(set(response.get_json()), {"id", "email"})


if __name__ == "__main__":
    unittest.main()
