# -------------------------
# Enums
# -------------------------
from .enums import (
    Role,
    SignupRole,
    OwnershipStatus,
    DocumentType,
    DocumentStatus,
    TransactionType,
    TransactionStatus,
    NotificationType,
    LandSort,
)

# -------------------------
# Profiles / Auth
# -------------------------
from .profile import ProfileRead, ProfileUpdate, SignupRequest
from .auth import LoginRequest, TokenResponse, SignupResponse, RouteResponse

# -------------------------
# Land Records
# -------------------------
from .land_record import (
    LandRecordCreate,
    LandRecordUpdate,
    LandRecordRead,
    LandStatusUpdate,
    LandStatusCounts,
    MyLandsResponse,
)

# -------------------------
# Ownership Documents
# -------------------------
from .document import (
    DocumentCreate,
    DocumentReview,
    DocumentRead,
    DocumentStatusCounts,
    MyDocumentsResponse,
)

# -------------------------
# Transactions / Notifications / Zoning
# -------------------------
from .transaction import TransactionCreate, TransactionRead, TransactionStatusUpdate
from .notification import NotificationRead, NotificationList
from .zoning_law import ZoningLawCreate, ZoningLawUpdate, ZoningLawRead

__all__ = [
    # enums
    "Role",
    "SignupRole",
    "OwnershipStatus",
    "DocumentType",
    "DocumentStatus",
    "TransactionType",
    "TransactionStatus",
    "NotificationType",
    "LandSort",

    # profiles / auth
    "ProfileRead",
    "ProfileUpdate",
    "SignupRequest",
    "LoginRequest",
    "TokenResponse",
    "SignupResponse",
    "RouteResponse",

    # land records
    "LandRecordCreate",
    "LandRecordUpdate",
    "LandRecordRead",
    "LandStatusUpdate",
    "LandStatusCounts",
    "MyLandsResponse",

    # documents
    "DocumentCreate",
    "DocumentReview",
    "DocumentRead",
    "DocumentStatusCounts",
    "MyDocumentsResponse",

    # transactions / notifications / zoning
    "TransactionCreate",
    "TransactionRead",
    "TransactionStatusUpdate",
    "NotificationRead",
    "NotificationList",
    "ZoningLawCreate",
    "ZoningLawUpdate",
    "ZoningLawRead",
]
