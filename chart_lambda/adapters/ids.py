import secrets

DEFAULT_ID_LENGTH = 12


class ShortIdGenerator:
    """
    Random URL-safe identifiers.

    token_urlsafe yields ~6 bits per character, so the default length of 12
    carries 72 bits of entropy.
    """

    def __init__(self, length: int = DEFAULT_ID_LENGTH) -> None:
        if length < 8:
            raise ValueError("Identifier length must be at least 8 characters")
        self.length = length

    def generate(self) -> str:
        # token_urlsafe(n) returns ceil(4n/3) characters
        return secrets.token_urlsafe(self.length)[: self.length]
