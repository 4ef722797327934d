from __future__ import annotations

from dataclasses import dataclass

from app.domain.errors import PasswordPolicyViolation

SPECIAL_CHARACTERS = set("!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~ ")


@dataclass(frozen=True)
class PasswordPolicy:
    min_length: int = 8
    max_length: int = 255
    require_upper_case: int = 0
    require_lower_case: int = 0
    require_digit: int = 0
    require_special_character: int = 0

    def validate(self, password: str | None) -> None:
        """Raise PasswordPolicyViolation listing every unmet rule."""
        password = password or ""
        errors: list[str] = []

        if len(password) < self.min_length:
            errors.append(
                f"Password must be at least {self.min_length} characters in length."
            )
        if len(password) > self.max_length:
            errors.append(
                f"Password must be no more than {self.max_length} characters in length."
            )

        counts = {
            "uppercase": sum(1 for c in password if c.isupper()),
            "lowercase": sum(1 for c in password if c.islower()),
            "digit": sum(1 for c in password if c.isdigit()),
            "special": sum(1 for c in password if c in SPECIAL_CHARACTERS),
        }
        required = {
            "uppercase": self.require_upper_case,
            "lowercase": self.require_lower_case,
            "digit": self.require_digit,
            "special": self.require_special_character,
        }
        for kind, minimum in required.items():
            if counts[kind] < minimum:
                noun = "character" if minimum == 1 else "characters"
                errors.append(f"Password must contain at least {minimum} {kind} {noun}.")

        if errors:
            raise PasswordPolicyViolation(errors)
