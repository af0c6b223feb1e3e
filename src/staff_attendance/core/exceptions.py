class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class NotFoundError(DomainError):
    """Referenced staff, admin or record does not exist."""


class ConfigurationMissingError(DomainError):
    """Geofence has not been configured yet."""


class OutOfRangeError(DomainError):
    """Reported coordinate lies outside the school's tolerance radius."""


class DuplicateCheckInError(DomainError):
    """A record already exists for this staff member today."""


class HolidayBlockedError(DomainError):
    """Check-in attempted on a configured holiday."""


class NoCheckInFoundError(DomainError):
    """Checkout attempted without a check-in record for today."""


class AlreadyCheckedOutError(DomainError):
    """Checkout attempted twice on the same day."""
