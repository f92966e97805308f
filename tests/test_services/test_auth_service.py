import unittest
from datetime import datetime, timedelta, timezone

from fastapi import HTTPException
from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session, sessionmaker

from core.database import Base
import models_bootstrap  # noqa: F401
from auth.models import RefreshToken
from auth.schemas import SignupRequest
from auth.services import auth_service
from auth.utils.auth_utils import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    hash_refresh_token,
    verify_password,
)
from company.models import Company
from department.models import Department


def signup_payload(**overrides):
    data = {
        "email": "Owner@Example.com",
        "password": "correct-horse",
        "first_name": "Olive",
        "last_name": "Owner",
        "company": {
            "name": "Acme Ltd",
            "departments": [{"name": "Sales"}, {"name": "sales"}, {"name": "Finance"}],
        },
    }
    data.update(overrides)
    return SignupRequest(**data)


class AuthUtilsTests(unittest.TestCase):
    def test_password_hash_roundtrip(self):
        hashed = get_password_hash("s3cret-pass")
        self.assertNotEqual(hashed, "s3cret-pass")
        self.assertTrue(verify_password("s3cret-pass", hashed))
        self.assertFalse(verify_password("wrong", hashed))

    def test_verify_password_malformed_hash(self):
        self.assertFalse(verify_password("anything", "not-a-bcrypt-hash"))

    def test_access_token_carries_issuer(self):
        token = create_access_token({"sub": "5"})
        payload = decode_access_token(token)
        self.assertEqual(payload["sub"], "5")
        self.assertEqual(payload["iss"], "hr-management-system")


class AuthServiceTests(unittest.TestCase):
    def setUp(self):
        self.engine = create_engine("sqlite:///:memory:", future=True)
        Base.metadata.create_all(self.engine)
        TestingSession = sessionmaker(bind=self.engine, future=True)
        self.db: Session = TestingSession()
        self.user = auth_service.signup_with_company(self.db, signup_payload())

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    # ---- signup ----
    def test_signup_creates_company_departments_and_superuser(self):
        self.assertEqual(self.user.email, "owner@example.com")
        self.assertEqual(self.user.role.name, "superuser")
        company = self.db.get(Company, self.user.company_id)
        self.assertEqual(company.name, "Acme Ltd")
        self.assertIsNotNone(company.settings)
        names = sorted(d.name for d in self.db.scalars(select(Department)))
        self.assertEqual(names, ["Finance", "Sales"])

    def test_signup_duplicate_email_409(self):
        with self.assertRaises(HTTPException) as ctx:
            auth_service.signup_with_company(self.db, signup_payload(email="owner@example.com"))
        self.assertEqual(ctx.exception.status_code, 409)

    # ---- login ----
    def test_authenticate_user_ok_is_case_insensitive(self):
        user = auth_service.authenticate_user(self.db, "OWNER@example.com", "correct-horse")
        self.assertIsNotNone(user)
        self.assertIsNotNone(user.last_login_at)

    def test_authenticate_user_bad_password(self):
        self.assertIsNone(auth_service.authenticate_user(self.db, "owner@example.com", "nope"))

    def test_authenticate_user_inactive(self):
        self.user.is_active = False
        self.db.commit()
        self.assertIsNone(auth_service.authenticate_user(self.db, "owner@example.com", "correct-horse"))

    # ---- current user ----
    def test_get_current_user_from_token(self):
        token = auth_service.build_access_token(self.user)
        got = auth_service.get_current_user(token=token, db=self.db)
        self.assertEqual(got.id, self.user.id)

    def test_get_current_user_missing_token(self):
        with self.assertRaises(HTTPException) as ctx:
            auth_service.get_current_user(token=None, db=self.db)
        self.assertEqual(ctx.exception.status_code, 401)
        self.assertEqual(ctx.exception.detail, "access token required")

    def test_get_current_user_expired_token(self):
        token = create_access_token({"sub": str(self.user.id)}, expires_delta=timedelta(seconds=-5))
        with self.assertRaises(HTTPException) as ctx:
            auth_service.get_current_user(token=token, db=self.db)
        self.assertEqual(ctx.exception.detail, "access token expired")

    def test_get_current_user_garbage_token(self):
        with self.assertRaises(HTTPException) as ctx:
            auth_service.get_current_user(token="abc.def.ghi", db=self.db)
        self.assertEqual(ctx.exception.detail, "invalid access token")

    # ---- refresh tokens ----
    def test_issue_keeps_one_live_token(self):
        auth_service.issue_refresh_token(self.db, self.user.id)
        auth_service.issue_refresh_token(self.db, self.user.id)
        rows = list(self.db.scalars(select(RefreshToken).where(RefreshToken.user_id == self.user.id)))
        self.assertEqual(len(rows), 1)

    def test_rotate_returns_new_token_and_invalidates_old(self):
        raw = auth_service.issue_refresh_token(self.db, self.user.id)
        user, new_raw = auth_service.rotate_refresh_token(self.db, raw)
        self.assertEqual(user.id, self.user.id)
        self.assertNotEqual(raw, new_raw)
        with self.assertRaises(HTTPException) as ctx:
            auth_service.rotate_refresh_token(self.db, raw)
        self.assertEqual(ctx.exception.detail, "invalid refresh token")

    def test_rotate_expired(self):
        raw = auth_service.issue_refresh_token(self.db, self.user.id)
        row = self.db.scalars(select(RefreshToken).where(RefreshToken.token_hash == hash_refresh_token(raw))).first()
        row.expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
        self.db.commit()
        with self.assertRaises(HTTPException) as ctx:
            auth_service.rotate_refresh_token(self.db, raw)
        self.assertEqual(ctx.exception.detail, "refresh token expired")

    def test_rotate_missing(self):
        with self.assertRaises(HTTPException) as ctx:
            auth_service.rotate_refresh_token(self.db, None)
        self.assertEqual(ctx.exception.status_code, 401)

    def test_revoke(self):
        raw = auth_service.issue_refresh_token(self.db, self.user.id)
        self.assertTrue(auth_service.revoke_refresh_token(self.db, raw))
        self.assertFalse(auth_service.revoke_refresh_token(self.db, "unknown"))
        with self.assertRaises(HTTPException):
            auth_service.rotate_refresh_token(self.db, raw)


if __name__ == "__main__":
    unittest.main()
