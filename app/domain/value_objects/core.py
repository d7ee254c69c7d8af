"""Domain value objects for the Clientele application.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import re
from dataclasses import dataclass

# Deliberately loose: one '@', no whitespace, a dot in the domain part.
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass(frozen=True)
class EmailAddress:
    """Value object for a client's login email.

    Normalized on construction (surrounding whitespace stripped, lower-cased)
    so that uniqueness checks compare like with like.
    """

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValueError("Email must be a non-empty string")
        normalized = self.value.strip().lower()
        if len(normalized) > 254:
            raise ValueError("Email must be at most 254 characters")
        if not _EMAIL_RE.match(normalized):
            raise ValueError(f"Invalid email address: {self.value!r}")
        object.__setattr__(self, "value", normalized)

    def __str__(self) -> str:
        return self.value
