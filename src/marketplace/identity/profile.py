"""Profile aggregate — who a marketplace user is and whether they sell or buy.

Profiles are keyed by the external auth user id, so the same id identifies the
customer or farmer on carts, purchase requests and product listings.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Identifier, String, Text

from marketplace.domain import marketplace
from marketplace.shared.errors import NotFoundError

_UNSET = object()


class UserType(Enum):
    CUSTOMER = "customer"
    FARMER = "farmer"


@marketplace.aggregate
class Profile:
    user_id: Identifier(identifier=True)
    full_name: String(max_length=255)
    email: String(required=True, max_length=254)
    user_type: String(choices=UserType, default=UserType.CUSTOMER.value)
    phone: String(max_length=20)
    address: Text()
    farm_name: String(max_length=255)
    farm_location: String(max_length=255)
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def register(
        cls,
        user_id,
        email,
        full_name=None,
        user_type=UserType.CUSTOMER.value,
        phone=None,
        address=None,
        farm_name=None,
        farm_location=None,
    ):
        from marketplace.identity.events import ProfileRegistered

        now = datetime.now(UTC)
        profile = cls(
            user_id=user_id,
            email=email,
            full_name=full_name,
            user_type=user_type,
            phone=phone,
            address=address,
            farm_name=farm_name,
            farm_location=farm_location,
            created_at=now,
            updated_at=now,
        )
        profile.raise_(
            ProfileRegistered(
                user_id=str(user_id),
                email=email,
                full_name=full_name,
                user_type=profile.user_type,
                registered_at=now,
            )
        )
        return profile

    def update(
        self,
        full_name=_UNSET,
        phone=_UNSET,
        address=_UNSET,
        farm_name=_UNSET,
        farm_location=_UNSET,
    ):
        from marketplace.identity.events import ProfileUpdated

        if full_name is not _UNSET:
            self.full_name = full_name
        if phone is not _UNSET:
            self.phone = phone
        if address is not _UNSET:
            self.address = address
        if farm_name is not _UNSET:
            self.farm_name = farm_name
        if farm_location is not _UNSET:
            self.farm_location = farm_location

        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProfileUpdated(
                user_id=str(self.user_id),
                full_name=self.full_name,
                phone=self.phone,
                farm_name=self.farm_name,
                farm_location=self.farm_location,
            )
        )

    @property
    def is_farmer(self):
        return self.user_type == UserType.FARMER.value


@marketplace.repository(part_of=Profile)
class ProfileRepository:
    def load(self, user_id) -> Profile:
        """Fetch a profile or raise `NotFoundError`."""
        try:
            return self.get(str(user_id))
        except ObjectNotFoundError:
            raise NotFoundError({"profile": [f"No profile for user {user_id}"]}) from None

    def find_by_user_id(self, user_id) -> Profile | None:
        profiles = self._dao.query.filter(user_id=str(user_id)).all().items
        return profiles[0] if profiles else None

    def find_by_user_ids(self, user_ids) -> list[Profile]:
        return self._dao.query.filter(user_id__in=[str(u) for u in user_ids]).all().items

    def find_farmers(self) -> list[Profile]:
        return self._dao.query.filter(user_type=UserType.FARMER.value).all().items
