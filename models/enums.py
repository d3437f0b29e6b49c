from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string
    and provides a .list() method for UI dropdowns.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def list(cls):
        return [item.value for item in cls]


# -----------------------------------------------------
# DASHBOARD ROLE
# -----------------------------------------------------
class Role(BaseStrEnum):
    """Coarse access level, re-derived on every request."""

    super_admin = "super_admin"
    admin = "admin"
    moderator = "moderator"
    club_owner = "club_owner"
    none = "none"


# -----------------------------------------------------
# ROLE WITHIN A VENUE (venue_owners.role)
# -----------------------------------------------------
class VenueOwnerRole(BaseStrEnum):
    owner = "owner"
    manager = "manager"
    staff = "staff"


# -----------------------------------------------------
# ADMIN USER ROLE (admin_users.role)
# -----------------------------------------------------
class AdminUserRole(BaseStrEnum):
    """Roles a super admin can grant through admin user management."""

    admin = "admin"
    moderator = "moderator"


# -----------------------------------------------------
# VENUE
# -----------------------------------------------------
class VenueType(BaseStrEnum):
    nightclub = "nightclub"
    bar = "bar"
    restaurant = "restaurant"
    lounge = "lounge"


class PriceRange(BaseStrEnum):
    budget = "$"
    moderate = "$$"
    expensive = "$$$"
    luxury = "$$$$"


class ImageType(BaseStrEnum):
    cover = "cover"
    interior = "interior"
    exterior = "exterior"
    menu = "menu"
    event = "event"


# -----------------------------------------------------
# PROMOTIONS
# -----------------------------------------------------
class PromotionType(BaseStrEnum):
    discount = "discount"
    free_drink = "free_drink"
    vip_access = "vip_access"
    happy_hour = "happy_hour"


class DayOfWeek(BaseStrEnum):
    monday = "monday"
    tuesday = "tuesday"
    wednesday = "wednesday"
    thursday = "thursday"
    friday = "friday"
    saturday = "saturday"
    sunday = "sunday"


# -----------------------------------------------------
# USER INTERACTIONS
# -----------------------------------------------------
class InteractionType(BaseStrEnum):
    like = "like"
    save = "save"
    share = "share"
    check_in = "check_in"
    review = "review"


# -----------------------------------------------------
# USERS LIST FILTERS
# -----------------------------------------------------
class AuthProvider(BaseStrEnum):
    email = "email"
    google = "google"
    apple = "apple"


class UserStatusFilter(BaseStrEnum):
    all = "all"
    active = "active"
    inactive = "inactive"


class UserRoleFilter(BaseStrEnum):
    all = "all"
    super_admin = "super_admin"
    admin = "admin"
    moderator = "moderator"
    club_owner = "club_owner"
    user = "user"
