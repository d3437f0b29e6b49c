# -------------------------
# Enums
# -------------------------
from .enums import (
    Role,
    VenueOwnerRole,
    AdminUserRole,
    VenueType,
    PriceRange,
    ImageType,
    PromotionType,
    DayOfWeek,
    InteractionType,
    AuthProvider,
    UserStatusFilter,
    UserRoleFilter,
)

# -------------------------
# Caller
# -------------------------
from .principal import Principal

# -------------------------
# Venues
# -------------------------
from .venue import (
    OpeningHours,
    VenueForm,
    VenueUpdate,
    VerificationToggle,
)

from .venue_image import (
    VenueImage,
    ImageOrderPayload,
    VenueImageUpdate,
    UploadedMedia,
)

from .promotion import PromotionForm

# -------------------------
# Users / admin users
# -------------------------
from .user import (
    UserFilters,
    UserData,
    UserPage,
    StatusToggle,
)

from .admin_user import (
    AdminUserCreate,
    AdminUserUpdate,
)

# -------------------------
# Analytics
# -------------------------
from .analytics import (
    AnalyticsSample,
    AnalyticsSummary,
    VenuePerformanceMetrics,
    SystemMetrics,
    UserGrowthPoint,
    VenueActivityPoint,
    InteractionPoint,
    TopVenue,
)
