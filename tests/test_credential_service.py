"""Unit tests for CredentialService — password hashing and session tokens."""
import time
import uuid
from unittest.mock import patch

import bcrypt
import pytest
from jose import jwt

from app.errors import InvalidToken, Unauthenticated
from app.services.credential_service import CredentialService


@pytest.fixture
def service():
    return CredentialService()


class TestPasswordHashing:

    def test_hash_is_not_plaintext_and_verifies(self, service):
        hashed = service.hash_password("Str0ng!Pass")
        assert hashed != "Str0ng!Pass"
        assert service.verify_password("Str0ng!Pass", hashed)

    def test_wrong_password_rejected(self, service):
        hashed = service.hash_password("Str0ng!Pass")
        assert not service.verify_password("Str0ng!Pasz", hashed)

    def test_salted_hashes_differ(self, service):
        assert service.hash_password("Str0ng!Pass") != service.hash_password("Str0ng!Pass")

    def test_malformed_stored_hash_is_false(self, service):
        assert service.verify_password("Str0ng!Pass", "not-a-bcrypt-hash") is False
        assert service.verify_password("Str0ng!Pass", None) is False

    def test_decoy_check_runs_bcrypt_and_fails(self, service):
        with patch.object(bcrypt, "checkpw", wraps=bcrypt.checkpw) as checkpw:
            assert service.verify_against_decoy("Str0ng!Pass") is False
            assert service.verify_against_decoy("") is False
        assert checkpw.call_count == 2


class TestSessionTokens:

    def test_round_trip_user_id(self, service):
        user_id = uuid.uuid4()
        token = service.issue_token(user_id)
        assert service.verify_token(token) == user_id

    def test_claims_carry_id_and_iat(self, service):
        user_id = uuid.uuid4()
        token = service.issue_token(user_id, issued_at=1_700_000_000)
        claims = jwt.get_unverified_claims(token)
        assert claims["_id"] == str(user_id)
        assert claims["iat"] == 1_700_000_000
        assert claims["exp"] == 1_700_000_000 + 3600

    def test_one_hour_token_window(self, service):
        """Accepted at t+59min, rejected at t+61min."""
        issued = int(time.time())
        token = service.issue_token(uuid.uuid4(), ttl_seconds=3600, issued_at=issued)

        service.verify_token(token, now=issued + 59 * 60)
        with pytest.raises(InvalidToken):
            service.verify_token(token, now=issued + 61 * 60)

    def test_missing_token(self, service):
        with pytest.raises(InvalidToken):
            service.verify_token("")

    def test_tampered_signature(self, service):
        token = service.issue_token(uuid.uuid4())
        forged = jwt.encode(jwt.get_unverified_claims(token), "other-secret", algorithm="HS256")
        with pytest.raises(InvalidToken):
            service.verify_token(forged)

    def test_garbage_token(self, service):
        with pytest.raises(Unauthenticated):
            service.verify_token("definitely.not.a-jwt")

    def test_token_without_user_id(self, service):
        now = int(time.time())
        token = jwt.encode({"iat": now, "exp": now + 60}, service.secret, algorithm="HS256")
        with pytest.raises(InvalidToken):
            service.verify_token(token)
