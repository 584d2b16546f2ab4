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
# PROFILE ROLE
# -----------------------------------------------------
class Role(BaseStrEnum):
    """Access tier; decides the screen set and the data a user sees."""

    admin = "admin"
    landowner = "landowner"
    public = "public"


class SignupRole(BaseStrEnum):
    """Roles a user may pick for themselves. Admins are appointed, never self-registered."""

    landowner = "landowner"
    public = "public"


# -----------------------------------------------------
# LAND RECORD OWNERSHIP STATUS
# -----------------------------------------------------
class OwnershipStatus(BaseStrEnum):
    verified = "verified"
    pending = "pending"
    disputed = "disputed"


# -----------------------------------------------------
# OWNERSHIP DOCUMENT
# -----------------------------------------------------
class DocumentType(BaseStrEnum):
    deed = "deed"
    survey = "survey"
    certificate = "certificate"
    other = "other"


class DocumentStatus(BaseStrEnum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


# -----------------------------------------------------
# TRANSACTION
# -----------------------------------------------------
class TransactionType(BaseStrEnum):
    sale = "sale"
    transfer = "transfer"
    inheritance = "inheritance"


class TransactionStatus(BaseStrEnum):
    pending = "pending"
    approved = "approved"
    completed = "completed"
    cancelled = "cancelled"


# -----------------------------------------------------
# NOTIFICATION
# -----------------------------------------------------
class NotificationType(BaseStrEnum):
    info = "info"
    warning = "warning"
    success = "success"
    error = "error"


# -----------------------------------------------------
# PUBLIC SEARCH SORT ORDER
# -----------------------------------------------------
class LandSort(BaseStrEnum):
    newest = "newest"
    price_low = "price_low"
    price_high = "price_high"
    size_small = "size_small"
    size_large = "size_large"
