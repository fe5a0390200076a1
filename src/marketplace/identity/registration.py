"""Profile registration and maintenance — commands and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.domain import logger, marketplace
from marketplace.identity.profile import Profile, UserType


@marketplace.command(part_of="Profile")
class RegisterProfile:
    user_id: Identifier(required=True)
    email: String(required=True, max_length=254)
    full_name: String(max_length=255)
    user_type: String(choices=UserType, default=UserType.CUSTOMER.value)
    phone: String(max_length=20)
    address: Text()
    farm_name: String(max_length=255)
    farm_location: String(max_length=255)


@marketplace.command(part_of="Profile")
class UpdateProfile:
    user_id: Identifier(required=True)
    full_name: String(max_length=255)
    phone: String(max_length=20)
    address: Text()
    farm_name: String(max_length=255)
    farm_location: String(max_length=255)


@marketplace.command_handler(part_of=Profile)
class ManageProfileHandler:
    @handle(RegisterProfile)
    def register_profile(self, command):
        repo = current_domain.repository_for(Profile)
        if repo.find_by_user_id(command.user_id) is not None:
            raise ValidationError({"user_id": [f"Profile for user {command.user_id} already exists"]})

        profile = Profile.register(
            user_id=command.user_id,
            email=command.email,
            full_name=command.full_name,
            user_type=command.user_type or UserType.CUSTOMER.value,
            phone=command.phone,
            address=command.address,
            farm_name=command.farm_name,
            farm_location=command.farm_location,
        )
        repo.add(profile)
        logger.info("Profile registered", user_id=str(profile.user_id), user_type=profile.user_type)
        return str(profile.user_id)

    @handle(UpdateProfile)
    def update_profile(self, command):
        repo = current_domain.repository_for(Profile)
        profile = repo.load(command.user_id)
        # Only fields present on the command are changed
        changes = {
            field: getattr(command, field)
            for field in ("full_name", "phone", "address", "farm_name", "farm_location")
            if getattr(command, field) is not None
        }
        profile.update(**changes)
        repo.add(profile)
