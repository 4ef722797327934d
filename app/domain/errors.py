class DomainError(Exception):
    """Base class for all domain-level errors."""

    pass


class PasswordPolicyViolation(DomainError):
    """The password does not satisfy the zone's password policy."""

    def __init__(self, errors: list[str] | str):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class PasswordReuse(PasswordPolicyViolation):
    """The new password is the same as the current one."""

    def __init__(self):
        super().__init__("Your new password cannot be the same as the old password.")


class AccountAlreadyExists(DomainError):
    """An account with this username and origin already exists in the zone."""

    pass


class AccountAlreadyActive(DomainError):
    """Activation attempted on an account that is already verified."""

    def __init__(self, message: str = "User already active."):
        super().__init__(message)


class ResetConflict(DomainError):
    """The username belongs to an account managed by another origin."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"account {user_id} is not managed locally")


class AccountNotFound(DomainError):
    """No account matches the lookup criteria."""

    pass


class InvalidCode(DomainError):
    """The code was never issued, has expired, or was already used."""

    pass


class MalformedCodePayload(DomainError):
    """A consumed code carries a payload that does not match its schema."""

    pass


class ProvisioningError(DomainError):
    """Account creation failed for a reason other than a duplicate."""

    pass


class TransientStorageError(DomainError):
    """A backing store is unavailable; the caller may retry."""

    pass


class InternalConsistencyError(DomainError):
    """State changed underneath a call sequence that is not expected to race."""

    pass


class StaleAccountVersion(InternalConsistencyError):
    """Optimistic update rejected because the stored version moved on."""

    def __init__(self, user_id: str, version: int):
        self.user_id = user_id
        self.version = version
        super().__init__(f"account {user_id} is no longer at version {version}")
