"""
Standalone tests for the FastAPI auth layer.
Tests staff tokens, the staff account store, and auth endpoints.
All test artifacts use temp directories and are cleaned up after.
"""
import os
import sys
import tempfile
import shutil
import sqlite3
import unittest
from pathlib import Path

# Ensure src/ is on path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / 'src'))

SECRET = "test-secret-key-for-jwt-testing-only"


class TestStaffTokens(unittest.TestCase):
    """Test token issue and verification."""

    def setUp(self):
        from api.auth.tokens import StaffTokens
        self.tokens = StaffTokens(secret=SECRET, algorithm="HS256", access_minutes=1, refresh_days=1)

    def test_issue_pair(self):
        pair = self.tokens.issue("staff-1")
        self.assertEqual(pair["token_type"], "bearer")
        self.assertEqual(pair["expires_in"], 60)
        self.assertEqual(self.tokens.staff_id(pair["access_token"]), "staff-1")

    def test_refresh_token(self):
        from api.auth.tokens import REFRESH
        pair = self.tokens.issue("staff-1")
        self.assertEqual(self.tokens.staff_id(pair["refresh_token"], token_type=REFRESH), "staff-1")

    def test_wrong_type_rejected(self):
        from api.auth.tokens import REFRESH
        pair = self.tokens.issue("staff-1")
        self.assertIsNone(self.tokens.staff_id(pair["access_token"], token_type=REFRESH))
        self.assertIsNone(self.tokens.staff_id(pair["refresh_token"]))

    def test_tokens_are_unique(self):
        self.assertNotEqual(self.tokens.issue("staff-1")["access_token"],
                            self.tokens.issue("staff-1")["access_token"])

    def test_invalid_token_rejected(self):
        self.assertIsNone(self.tokens.staff_id("not-a-real-token"))

    def test_foreign_issuer_rejected(self):
        import jwt
        from datetime import datetime, timedelta, timezone
        token = jwt.encode(
            {"sub": "staff-1", "type": "access", "iss": "someone-else",
             "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
            SECRET,
            algorithm="HS256",
        )
        self.assertIsNone(self.tokens.staff_id(token))

    def test_token_without_expiry_rejected(self):
        import jwt
        from api.auth.tokens import TOKEN_ISSUER
        token = jwt.encode({"sub": "staff-1", "type": "access", "iss": TOKEN_ISSUER}, SECRET, algorithm="HS256")
        self.assertIsNone(self.tokens.staff_id(token))

    def test_other_secret_rejected(self):
        from api.auth.tokens import StaffTokens
        token = StaffTokens(secret="another-secret").issue("staff-1")["access_token"]
        self.assertIsNone(self.tokens.staff_id(token))

    def test_empty_secret_raises(self):
        from api.auth.tokens import StaffTokens
        with self.assertRaises(ValueError):
            StaffTokens(secret="")


class TestStaffStore(unittest.TestCase):
    """Test the SQLite staff account store."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp(prefix="depot_api_test_staff_")
        self.db_path = os.path.join(self.temp_dir, "test_users.db")
        from api.auth.staff_store import StaffStore
        self.store = StaffStore(db_path=self.db_path)

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_register(self):
        staff = self.store.register("Clerk@Depot.ng ", "password123", " Ada Clerk ")
        self.assertIsNotNone(staff)
        self.assertEqual(staff["email"], "clerk@depot.ng")
        self.assertEqual(staff["full_name"], "Ada Clerk")
        self.assertEqual(staff["order_count"], 0)
        self.assertIsNone(staff["last_order_id"])
        self.assertNotIn("password_hash", staff)

    def test_duplicate_email_rejected(self):
        self.store.register("clerk@depot.ng", "password123", "Ada Clerk")
        self.assertIsNone(self.store.register("CLERK@depot.ng", "other_pass", "Other"))

    def test_authenticate(self):
        self.store.register("Clerk@Depot.ng", "password123", "Ada Clerk")
        self.assertIsNotNone(self.store.authenticate("clerk@depot.ng", "password123"))
        self.assertIsNone(self.store.authenticate("clerk@depot.ng", "wrong_password"))
        self.assertIsNone(self.store.authenticate("nobody@depot.ng", "password123"))

    def test_get(self):
        created = self.store.register("clerk@depot.ng", "password123", "Ada Clerk")
        self.assertEqual(self.store.get(created["id"])["email"], "clerk@depot.ng")
        self.assertIsNone(self.store.get("missing"))

    def test_record_order(self):
        created = self.store.register("clerk@depot.ng", "password123", "Ada Clerk")
        self.store.record_order(created["id"], "ORD-1709631015123")
        self.store.record_order(created["id"], "ORD-1709631015124")
        staff = self.store.get(created["id"])
        self.assertEqual(staff["order_count"], 2)
        self.assertEqual(staff["last_order_id"], "ORD-1709631015124")
        self.assertIsNotNone(staff["last_order_at"])

    def test_deactivated_account_hidden(self):
        created = self.store.register("clerk@depot.ng", "password123", "Ada Clerk")
        conn = sqlite3.connect(self.db_path)
        conn.execute("UPDATE staff_accounts SET is_active = 0 WHERE id = ?", (created["id"],))
        conn.commit()
        conn.close()
        self.assertIsNone(self.store.get(created["id"]))
        self.assertIsNone(self.store.authenticate("clerk@depot.ng", "password123"))

    def test_password_is_hashed(self):
        """Ensure password is not stored in plaintext."""
        self.store.register("clerk@depot.ng", "password123", "Ada Clerk")
        conn = sqlite3.connect(self.db_path)
        row = conn.execute("SELECT password_hash FROM staff_accounts WHERE email = 'clerk@depot.ng'").fetchone()
        conn.close()
        self.assertNotEqual(row[0], "password123")
        self.assertTrue(row[0].startswith("$2b$"))  # bcrypt prefix


class TestAuthEndpoints(unittest.TestCase):
    """Test FastAPI auth endpoints using TestClient."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp(prefix="depot_api_test_endpoints_")

        # Set config before importing
        os.environ["API_JWT_SECRET"] = "test-secret-for-endpoint-testing"
        os.environ["API_USER_DB_PATH"] = os.path.join(self.temp_dir, "test_users.db")
        os.environ["API_JWT_EXPIRY_MINUTES"] = "5"
        os.environ["LOCAL_CONFIG_PATH"] = os.path.join(self.temp_dir, "app_config.json")

        # Reset auth dependencies (they may have been initialized by a previous test)
        import api.auth.dependencies as deps
        deps._tokens = None
        deps._staff = None

        # Reload config so it picks up the new env vars
        import importlib
        import config
        importlib.reload(config)

        from api import helpers
        helpers.init_sales(None, None)

        from api.main import create_app
        from fastapi.testclient import TestClient
        self.app = create_app()
        self.client = TestClient(self.app)

    def tearDown(self):
        import api.auth.dependencies as deps
        from api import helpers
        deps._tokens = None
        deps._staff = None
        helpers.init_sales(None, None)

        shutil.rmtree(self.temp_dir, ignore_errors=True)
        for key in ["API_JWT_SECRET", "API_USER_DB_PATH", "API_JWT_EXPIRY_MINUTES", "LOCAL_CONFIG_PATH"]:
            os.environ.pop(key, None)

    def _register_and_login(self, email="clerk@depot.ng"):
        self.client.post("/auth/register", json={
            "email": email, "password": "SecurePass1", "full_name": "Ada Clerk",
        })
        login = self.client.post("/auth/login", json={"email": email, "password": "SecurePass1"})
        return login.json()

    def _headers(self, token):
        return {"Authorization": f"Bearer {token}"}

    def test_root(self):
        res = self.client.get("/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["service"], "Depot Sales API")

    def test_register_success(self):
        res = self.client.post("/auth/register", json={
            "email": "new@depot.ng", "password": "SecurePass1", "full_name": "New Clerk",
        })
        self.assertEqual(res.status_code, 201)
        data = res.json()
        self.assertEqual(data["email"], "new@depot.ng")
        self.assertEqual(data["order_count"], 0)
        self.assertFalse(data["own_config"])
        self.assertNotIn("password_hash", data)

    def test_register_duplicate(self):
        body = {"email": "dup@depot.ng", "password": "SecurePass1", "full_name": "Clerk"}
        self.client.post("/auth/register", json=body)
        res = self.client.post("/auth/register", json=body)
        self.assertEqual(res.status_code, 409)

    def test_register_short_password(self):
        res = self.client.post("/auth/register", json={
            "email": "short@depot.ng", "password": "123", "full_name": "Clerk",
        })
        self.assertEqual(res.status_code, 422)

    def test_login_success(self):
        data = self._register_and_login()
        self.assertIn("access_token", data)
        self.assertIn("refresh_token", data)
        self.assertEqual(data["token_type"], "bearer")
        self.assertEqual(data["expires_in"], 300)
        self.assertNotIn("role", data)

    def test_login_wrong_password(self):
        self._register_and_login()
        res = self.client.post("/auth/login", json={"email": "clerk@depot.ng", "password": "WrongPass1"})
        self.assertEqual(res.status_code, 401)

    def test_me_with_token(self):
        token = self._register_and_login()["access_token"]
        res = self.client.get("/auth/me", headers=self._headers(token))
        self.assertEqual(res.status_code, 200)
        data = res.json()
        self.assertEqual(data["email"], "clerk@depot.ng")
        self.assertEqual(data["order_count"], 0)
        self.assertIsNone(data["last_order_id"])
        self.assertFalse(data["own_config"])
        self.assertIsNone(data["config_updated_at"])

    def test_me_reports_own_config(self):
        headers = self._headers(self._register_and_login()["access_token"])
        res = self.client.put("/config", json={"companyName": "Ikeja Depot"}, headers=headers)
        self.assertEqual(res.status_code, 200)

        data = self.client.get("/auth/me", headers=headers).json()
        self.assertTrue(data["own_config"])
        self.assertIsNotNone(data["config_updated_at"])

    def test_me_without_token(self):
        res = self.client.get("/auth/me")
        # HTTPBearer answers 401 or 403 depending on the FastAPI version
        self.assertIn(res.status_code, [401, 403])

    def test_me_with_bad_token(self):
        res = self.client.get("/auth/me", headers={"Authorization": "Bearer garbage"})
        self.assertEqual(res.status_code, 401)

    def test_refresh_token(self):
        refresh = self._register_and_login()["refresh_token"]
        res = self.client.post("/auth/refresh", json={"refresh_token": refresh})
        self.assertEqual(res.status_code, 200)
        self.assertIn("access_token", res.json())

    def test_access_token_not_accepted_for_refresh(self):
        access = self._register_and_login()["access_token"]
        res = self.client.post("/auth/refresh", json={"refresh_token": access})
        self.assertEqual(res.status_code, 401)

    def test_deactivated_account_locked_out(self):
        pair = self._register_and_login()
        conn = sqlite3.connect(os.environ["API_USER_DB_PATH"])
        conn.execute("UPDATE staff_accounts SET is_active = 0 WHERE email = 'clerk@depot.ng'")
        conn.commit()
        conn.close()

        self.assertEqual(self.client.post("/auth/refresh", json={"refresh_token": pair["refresh_token"]}).status_code,
                         401)
        self.assertEqual(self.client.get("/auth/me", headers=self._headers(pair["access_token"])).status_code, 401)

    def test_health_no_auth(self):
        res = self.client.get("/health")
        self.assertEqual(res.status_code, 200)
        self.assertIn(res.json()["status"], ["healthy", "degraded"])

    def test_swagger_docs(self):
        self.assertEqual(self.client.get("/docs").status_code, 200)

    def test_openapi_json(self):
        res = self.client.get("/openapi.json")
        self.assertEqual(res.status_code, 200)
        data = res.json()
        self.assertEqual(data["info"]["title"], "Depot Sales API")
        for path in ("/auth/login", "/auth/register", "/config", "/catalog", "/orders",
                     "/orders/{order_id}/receipt", "/orders/{order_id}/receipt.png",
                     "/health", "/health/connectivity"):
            self.assertIn(path, data["paths"])


if __name__ == "__main__":
    unittest.main()
