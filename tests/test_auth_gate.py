import os
import tempfile
import unittest
from datetime import timedelta


class TestAuthGate(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        db_fd, cls.db_path = tempfile.mkstemp(suffix=".db")
        os.close(db_fd)
        os.environ["JWT_SECRET_KEY"] = "test-secret"

        from app import create_app
        from app.db import db
        from app.middleware import auth_gate
        from app.services import credential_service

        cls.app = create_app({
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{cls.db_path}",
            "JWT_SECRET_KEY": "test-secret",
        })
        cls.db = db
        cls.gate = auth_gate
        cls.credential_service = credential_service

    @classmethod
    def tearDownClass(cls):
        with cls.app.app_context():
            cls.db.engine.dispose()
        if os.path.exists(cls.db_path):
            os.remove(cls.db_path)

    def _token(self, ttl=None):
        with self.app.app_context():
            return self.credential_service.issue_token({"id": 3, "email": "c@x.com"}, ttl=ttl)

    def test_missing_or_malformed_header_is_401(self):
        with self.app.app_context():
            for header in (None, "", "Bearer", "Bearer   ", "Token abc", "bearer abc"):
                identity, error = self.gate.authenticate(header)
                self.assertIsNone(identity)
                self.assertEqual(error.status_code, 401)
                self.assertEqual(error.code, "MissingOrMalformedToken")

    def test_invalid_or_expired_token_is_403(self):
        expired = self._token(ttl=timedelta(seconds=-5))
        with self.app.app_context():
            for header in ("Bearer garbage", f"Bearer {expired}"):
                identity, error = self.gate.authenticate(header)
                self.assertIsNone(identity)
                self.assertEqual(error.status_code, 403)
                self.assertEqual(error.code, "InvalidToken")

    def test_valid_token_yields_identity(self):
        token = self._token()
        with self.app.app_context():
            identity, error = self.gate.authenticate(f"Bearer {token}")

        self.assertIsNone(error)
        self.assertEqual(identity, {"id": 3, "email": "c@x.com"})

    def test_auth_required_attaches_identity_and_short_circuits(self):
        calls = []

        @self.gate.auth_required
        def view():
            calls.append(self.gate.get_current_user())
            return "ok"

        token = self._token()
        with self.app.test_request_context(headers={"Authorization": f"Bearer {token}"}):
            self.assertEqual(view(), "ok")

        with self.app.test_request_context():
            response, status = view()
            self.assertEqual(status, 401)
            self.assertEqual(response.get_json()["code"], "MissingOrMalformedToken")

        self.assertEqual(calls, [{"id": 3, "email": "c@x.com"}])


if __name__ == "__main__":
    unittest.main()
