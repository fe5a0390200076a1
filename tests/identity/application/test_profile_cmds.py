"""Application tests for profile registration and authorization checks."""

import pytest
from marketplace.identity.authorization import require_profile
from marketplace.identity.profile import Profile, UserType
from marketplace.identity.registration import RegisterProfile, UpdateProfile
from marketplace.shared.errors import AuthorizationError
from protean import current_domain
from protean.exceptions import ValidationError


def _register(user_id="farmer-001", user_type="farmer", **overrides):
    return current_domain.process(
        RegisterProfile(user_id=user_id, email=f"{user_id}@example.com", user_type=user_type, **overrides),
        asynchronous=False,
    )


class TestRegisterProfile:
    def test_registers(self):
        user_id = _register(farm_name="Green Acres", farm_location="Enugu")
        profile = current_domain.repository_for(Profile).get(user_id)
        assert profile.farm_name == "Green Acres"
        assert profile.is_farmer

    def test_duplicate_rejected(self):
        _register()
        with pytest.raises(ValidationError):
            _register()


class TestUpdateProfile:
    def test_updates_given_fields(self):
        _register(phone="0801")
        current_domain.process(UpdateProfile(user_id="farmer-001", farm_name="Riverside"), asynchronous=False)

        profile = current_domain.repository_for(Profile).get("farmer-001")
        assert profile.farm_name == "Riverside"
        assert profile.phone == "0801"


class TestRequireProfile:
    def test_returns_profile(self):
        _register()
        assert str(require_profile("farmer-001", UserType.FARMER).user_id) == "farmer-001"

    def test_missing_actor(self):
        with pytest.raises(AuthorizationError):
            require_profile(None)

    def test_unknown_user(self):
        with pytest.raises(AuthorizationError):
            require_profile("nobody")

    def test_wrong_type(self):
        _register(user_id="cust-001", user_type="customer")
        with pytest.raises(AuthorizationError):
            require_profile("cust-001", UserType.FARMER)
