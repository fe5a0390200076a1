"""Domain events for the Profile aggregate."""

from protean.fields import DateTime, Identifier, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Profile")
class ProfileRegistered:
    """A user completed their marketplace profile as a customer or a farmer."""

    __version__ = 1

    user_id: Identifier(required=True)
    email: String(required=True)
    full_name: String()
    user_type: String(required=True)
    registered_at: DateTime(required=True)


@marketplace.event(part_of="Profile")
class ProfileUpdated:
    __version__ = 1

    user_id: Identifier(required=True)
    full_name: String()
    phone: String()
    farm_name: String()
    farm_location: String()
