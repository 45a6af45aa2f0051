"""
Unit tests for the user service.

Repositories are replaced by in-memory fakes and time by a fake clock,
so session expiry can be exercised without waiting.
"""

import pytest

from app.core.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from app.services.user_service import validate_password

EMAIL = "alice@example.com"
PASSWORD = "Password123!"


def _register(service, email=EMAIL, display_name="Alice", password=PASSWORD):
    return service.register(email, display_name, password)


# ======================================================================
# Validation
# ======================================================================


class TestPasswordPolicy:
    @pytest.mark.parametrize("password", ["Password123", "Password!", "P1!", "", "123456", "Pass123!" + "x" * 80,
                                          "Pass123!" + "é" * 40])
    def test_weak_passwords_rejected(self, password):
        with pytest.raises(ValidationError) as exc:
            validate_password(password)
        assert exc.value.code == "3003"
        assert exc.value.message == "password does not meet requirements"

    @pytest.mark.parametrize("password", ["Password123!", "abc1 d", "pässw0rd", "Pass123!" + "x" * 64])
    def test_strong_passwords_accepted(self, password):
        validate_password(password)


class TestRegister:
    def test_register_returns_user_and_session(self, user_service):
        user, token = _register(user_service)
        assert user.email == EMAIL
        assert user.display_name == "Alice"
        assert not user.is_admin
        assert user_service.get_current_user(token).id == user.id

    def test_password_is_hashed(self, user_service):
        user, _ = _register(user_service)
        assert user.hashed_password != PASSWORD
        assert PASSWORD not in user.model_dump_json(exclude={ "hashed_password" })

    def test_display_name_is_trimmed(self, user_service):
        user, _ = _register(user_service, display_name="  Alice  ")
        assert user.display_name == "Alice"

    def test_duplicate_email_conflicts(self, user_service):
        _register(user_service)
        with pytest.raises(ConflictError) as exc:
            _register(user_service, display_name="Other")
        assert exc.value.code == "3005"
        assert exc.value.message == "user already exists"

    @pytest.mark.parametrize("email", ["", "not-an-email", "a@b", "alice@example", "a" * 250 + "@example.com"])
    def test_invalid_email(self, user_service, email):
        with pytest.raises(ValidationError) as exc:
            _register(user_service, email=email)
        assert exc.value.code == "3001"

    @pytest.mark.parametrize("display_name", ["", "   ", "x" * 256])
    def test_invalid_display_name(self, user_service, display_name):
        with pytest.raises(ValidationError) as exc:
            _register(user_service, display_name=display_name)
        assert exc.value.code == "3002"

    def test_create_admin(self, user_service):
        admin = user_service.create_admin("root@example.com", "Root", PASSWORD)
        assert admin.is_admin
        assert user_service.get_user_by_email("root@example.com").is_admin


# ======================================================================
# Login / logout / sessions
# ======================================================================


class TestLogin:
    def test_login_opens_new_session(self, user_service):
        user, first = _register(user_service)
        logged_in, second = user_service.login(EMAIL, PASSWORD)
        assert logged_in.id == user.id
        assert second != first
        assert user_service.get_current_user(second).id == user.id

    def test_wrong_password_and_unknown_email_look_the_same(self, user_service):
        _register(user_service)
        with pytest.raises(AuthenticationError) as wrong:
            user_service.login(EMAIL, "Wrong123!")
        with pytest.raises(AuthenticationError) as unknown:
            user_service.login("bob@example.com", PASSWORD)
        assert wrong.value.code == unknown.value.code == "3025"
        assert wrong.value.message == unknown.value.message == "invalid credentials"

    @pytest.mark.parametrize("email, password", [("", PASSWORD), (EMAIL, ""), ("  ", "  ")])
    def test_blank_credentials(self, user_service, email, password):
        with pytest.raises(ValidationError) as exc:
            user_service.login(email, password)
        assert exc.value.code == "3009"


class TestSessions:
    def test_logout_invalidates_session(self, user_service):
        _, token = _register(user_service)
        user_service.logout(token)
        with pytest.raises(AuthenticationError) as exc:
            user_service.get_current_user(token)
        assert exc.value.code == "3010"

    def test_logout_unknown_session_is_not_an_error(self, user_service):
        user_service.logout("no-such-token")

    def test_blank_session_id(self, user_service):
        with pytest.raises(ValidationError) as exc:
            user_service.get_current_user(" ")
        assert exc.value.code == "3009"

    def test_session_expires(self, user_service, clock):
        _, token = _register(user_service)
        clock.advance(minutes=59)
        assert user_service.get_current_user(token)
        clock.advance(minutes=2)
        with pytest.raises(AuthenticationError):
            user_service.get_current_user(token)


# ======================================================================
# Profile
# ======================================================================


class TestProfile:
    def test_update_profile(self, user_service, clock):
        user, token = _register(user_service)
        clock.advance(minutes=1)
        updated = user_service.update_profile(user.id, " Alice B ")
        assert updated.display_name == "Alice B"
        assert updated.updated_at > user.updated_at
        assert user_service.get_current_user(token).display_name == "Alice B"

    def test_update_profile_unknown_user(self, user_service):
        with pytest.raises(NotFoundError):
            user_service.update_profile("missing", "Name")

    def test_change_password_revokes_other_sessions(self, user_service):
        user, old_token = _register(user_service)
        new_token = user_service.change_password(user.id, PASSWORD, "NewPass456?")

        with pytest.raises(AuthenticationError):
            user_service.get_current_user(old_token)
        assert user_service.get_current_user(new_token).id == user.id
        user_service.login(EMAIL, "NewPass456?")
        with pytest.raises(AuthenticationError):
            user_service.login(EMAIL, PASSWORD)

    def test_change_password_requires_current(self, user_service):
        user, _ = _register(user_service)
        with pytest.raises(AuthenticationError) as exc:
            user_service.change_password(user.id, "Wrong123!", "NewPass456?")
        assert exc.value.code == "3025"

    def test_change_password_enforces_policy(self, user_service):
        user, _ = _register(user_service)
        with pytest.raises(ValidationError) as exc:
            user_service.change_password(user.id, PASSWORD, "weak")
        assert exc.value.code == "3003"

    def test_change_password_rejects_overlong_password(self, user_service):
        user, token = _register(user_service)
        with pytest.raises(ValidationError) as exc:
            user_service.change_password(user.id, PASSWORD, "NewPass456?" + "x" * 70)
        assert exc.value.code == "3003"
        assert user_service.get_current_user(token).id == user.id
