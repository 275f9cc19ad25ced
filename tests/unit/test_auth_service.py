"""
Unit tests for AuthService.
"""
import pytest
from unittest.mock import patch
from jose import jwt
from goaltracker.config import Settings
from goaltracker.database.models import User
from goaltracker.exceptions import ConflictError, InvalidCredentialsError, NotFoundError
from goaltracker.services.auth_service import AuthService, normalize_email


@pytest.fixture
def auth_service(db_session):
    return AuthService(db_session)


class TestPasswordHashing:

    @pytest.mark.unit
    def test_hash_is_not_plaintext_and_verifies(self, auth_service):
        hashed = auth_service.get_password_hash("secret123")

        assert hashed != "secret123"
        assert auth_service.verify_password("secret123", hashed)
        assert not auth_service.verify_password("secret124", hashed)

    @pytest.mark.unit
    def test_same_password_gets_different_salts(self, auth_service):
        assert auth_service.get_password_hash("secret123") != auth_service.get_password_hash("secret123")

    @pytest.mark.unit
    def test_garbage_hash_does_not_verify(self, auth_service):
        assert auth_service.verify_password("secret123", "not-a-bcrypt-hash") is False

    @pytest.mark.unit
    def test_long_passwords_are_accepted(self, auth_service):
        password = "x" * 100
        assert auth_service.verify_password(password, auth_service.get_password_hash(password))


class TestTokens:

    @pytest.mark.unit
    def test_token_subject_is_user_id(self, auth_service):
        token = auth_service.create_access_token("user-1", "a@example.com")
        payload = auth_service.verify_token(token)

        assert payload.sub == "user-1"
        assert payload.email == "a@example.com"
        assert payload.exp > payload.iat

    @pytest.mark.unit
    def test_expired_token_is_rejected(self, db_session):
        settings = Settings()
        settings.ACCESS_TOKEN_EXPIRE_MINUTES = -5
        service = AuthService(db_session, settings=settings)

        assert service.verify_token(service.create_access_token("user-1", "a@example.com")) is None

    @pytest.mark.unit
    def test_token_signed_with_other_key_is_rejected(self, auth_service):
        forged = jwt.encode({"sub": "user-1", "email": "a@example.com", "exp": 9999999999, "iat": 0},
                            "another-key", algorithm="HS256")
        assert auth_service.verify_token(forged) is None

    @pytest.mark.unit
    def test_token_without_required_claims_is_rejected(self, auth_service):
        token = jwt.encode({"exp": 9999999999}, auth_service.settings.SECRET_KEY, algorithm="HS256")
        assert auth_service.verify_token(token) is None

    @pytest.mark.unit
    def test_malformed_token_is_rejected(self, auth_service):
        assert auth_service.verify_token("not.a.jwt") is None


class TestUserManagement:

    @pytest.mark.unit
    def test_normalize_email(self):
        assert normalize_email("  Someone@Example.COM ") == "someone@example.com"

    @pytest.mark.unit
    def test_register_returns_token_for_new_user(self, auth_service, db_session):
        token = auth_service.register("New@Example.com", "secret123")

        user = db_session.query(User).one()
        assert user.email == "new@example.com"
        assert user.password_hash != "secret123"
        assert auth_service.verify_token(token).sub == user.id

    @pytest.mark.unit
    def test_duplicate_registration_conflicts(self, auth_service, db_session):
        auth_service.register("dup@example.com", "secret123")

        with pytest.raises(ConflictError):
            auth_service.register("DUP@example.com", "another123")
        assert db_session.query(User).count() == 1

    @pytest.mark.unit
    def test_registration_losing_a_race_conflicts(self, auth_service, db_session):
        auth_service.register("race@example.com", "secret123")

        # the second registration passes the lookup before the first one commits
        with patch.object(AuthService, "get_user_by_email", return_value=None):
            with pytest.raises(ConflictError):
                auth_service.register("race@example.com", "secret123")

        assert db_session.query(User).count() == 1
        auth_service.register("after-race@example.com", "secret123")

    @pytest.mark.unit
    def test_login(self, auth_service, sample_user):
        token = auth_service.login("owner@example.com", "secret123")
        assert auth_service.verify_token(token).sub == sample_user.id

    @pytest.mark.unit
    def test_wrong_password_and_unknown_email_look_the_same(self, auth_service, sample_user):
        with pytest.raises(InvalidCredentialsError) as wrong_password:
            auth_service.login("owner@example.com", "wrong-password")
        with pytest.raises(InvalidCredentialsError) as unknown_email:
            auth_service.login("nobody@example.com", "secret123")

        assert wrong_password.value.message == unknown_email.value.message

    @pytest.mark.unit
    def test_update_email(self, auth_service, sample_user):
        user = auth_service.update_email(sample_user.id, "Renamed@Example.com")
        assert user.email == "renamed@example.com"

    @pytest.mark.unit
    def test_update_email_to_taken_address(self, auth_service, sample_user, other_user):
        with pytest.raises(ConflictError):
            auth_service.update_email(sample_user.id, other_user.email)

    @pytest.mark.unit
    def test_update_email_to_same_address(self, auth_service, sample_user):
        assert auth_service.update_email(sample_user.id, "owner@example.com").email == "owner@example.com"

    @pytest.mark.unit
    def test_reset_password(self, auth_service, sample_user):
        assert auth_service.reset_password(sample_user.id, "secret123", "brand-new-pass")

        auth_service.login("owner@example.com", "brand-new-pass")
        with pytest.raises(InvalidCredentialsError):
            auth_service.login("owner@example.com", "secret123")

    @pytest.mark.unit
    def test_reset_password_requires_current_password(self, auth_service, sample_user):
        with pytest.raises(InvalidCredentialsError):
            auth_service.reset_password(sample_user.id, "wrong-password", "brand-new-pass")

    @pytest.mark.unit
    def test_reset_password_for_missing_user(self, auth_service):
        with pytest.raises(NotFoundError):
            auth_service.reset_password("missing", "secret123", "brand-new-pass")

    @pytest.mark.unit
    def test_update_email_losing_a_race_conflicts(self, auth_service, sample_user, other_user):
        with patch.object(AuthService, "get_user_by_email", return_value=None):
            with pytest.raises(ConflictError):
                auth_service.update_email(sample_user.id, other_user.email)

        assert auth_service.get_user_by_id(sample_user.id).email == "owner@example.com"
