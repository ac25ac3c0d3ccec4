# tests/test_security.py
"""Tests for access token issuance, verification and password hashing."""

import base64
import json
import time
from datetime import timedelta

from jose import jwt

from guildhall.core.security import (
    create_access_token,
    hash_password,
    verify_access_token,
    verify_password,
)
from guildhall.core.settings import settings


def _b64(data: dict) -> str:
    raw = json.dumps(data, separators=(",", ":")).encode()
    return base64.urlsafe_b64encode(raw).decode().rstrip("=")


def _legacy_token(**claims) -> str:
    now = int(time.time())
    payload = {"user_id": 7, "username": "veteran", "iat": now, "exp": now + 3600, **claims}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


class TestTokenRoundTrip:
    def test_claims_survive_round_trip(self):
        token = create_access_token(42, "alice", ["user", "admin"])
        claims = verify_access_token(token)

        assert claims is not None
        assert claims.user_id == 42
        assert claims.username == "alice"
        assert claims.roles == ("admin", "user")
        assert claims.is_admin
        assert claims.expires_at - claims.issued_at == settings.access_token_expire_minutes * 60

    def test_default_lifetime_is_seven_days(self):
        claims = verify_access_token(create_access_token(1, "alice", ["user"]))
        assert claims.expires_at - claims.issued_at == 7 * 24 * 3600

    def test_regular_user_is_not_admin(self):
        claims = verify_access_token(create_access_token(1, "alice", ["user", "moderator"]))
        assert claims is not None
        assert not claims.is_admin

    def test_super_admin_is_admin(self):
        claims = verify_access_token(create_access_token(1, "root", ["super_admin"]))
        assert claims.is_admin

    def test_header_declares_hs256(self):
        header = jwt.get_unverified_header(create_access_token(1, "alice", ["user"]))
        assert header["alg"] == "HS256"
        assert header["typ"] == "JWT"


class TestTokenRejection:
    def test_expired_token_is_rejected(self):
        token = create_access_token(1, "alice", ["user"], expires_delta=timedelta(seconds=-5))
        assert verify_access_token(token) is None

    def test_tampered_payload_is_rejected(self):
        token = create_access_token(1, "alice", ["user"])
        header, payload, signature = token.split(".")
        now = int(time.time())
        forged = _b64(
            {"user_id": 1, "username": "alice", "roles": ["admin"], "iat": now, "exp": now + 60}
        )
        assert verify_access_token(f"{header}.{forged}.{signature}") is None

    def test_token_signed_with_other_secret_is_rejected(self):
        now = int(time.time())
        token = jwt.encode(
            {"user_id": 1, "username": "alice", "roles": ["user"], "iat": now, "exp": now + 60},
            "not-the-server-secret",
            algorithm="HS256",
        )
        assert verify_access_token(token) is None

    def test_wrong_segment_count_is_rejected(self):
        token = create_access_token(1, "alice", ["user"])
        header, payload, signature = token.split(".")
        assert verify_access_token(f"{header}.{payload}") is None
        assert verify_access_token(f"{token}.extra") is None

    def test_garbage_is_rejected(self):
        assert verify_access_token("not.a.token") is None
        assert verify_access_token("") is None
        assert verify_access_token(None) is None

    def test_missing_user_id_is_rejected(self):
        now = int(time.time())
        token = jwt.encode(
            {"username": "alice", "roles": ["user"], "iat": now, "exp": now + 60},
            settings.secret_key,
            algorithm="HS256",
        )
        assert verify_access_token(token) is None

    def test_missing_exp_is_rejected(self):
        token = jwt.encode(
            {"user_id": 1, "username": "alice", "roles": ["user"]},
            settings.secret_key,
            algorithm="HS256",
        )
        assert verify_access_token(token) is None


class TestLegacyTokens:
    def test_is_admin_flag_maps_to_admin_role(self):
        claims = verify_access_token(_legacy_token(is_admin=True))
        assert claims is not None
        assert claims.roles == ("admin",)
        assert claims.is_admin

    def test_missing_flag_maps_to_user_role(self):
        claims = verify_access_token(_legacy_token(is_admin=False))
        assert claims.roles == ("user",)
        assert not claims.is_admin


def test_password_hash_round_trip():
    hashed = hash_password("s3cret-pass")
    assert hashed != "s3cret-pass"
    assert verify_password("s3cret-pass", hashed)
    assert not verify_password("wrong-pass", hashed)


def test_verify_password_rejects_malformed_hash():
    assert not verify_password("anything", "not-a-bcrypt-hash")
