from typing import Protocol


class PasswordPolicyPort(Protocol):
    def validate(self, password: str) -> None:
        """Raise PasswordPolicyViolation if the password is not acceptable."""
