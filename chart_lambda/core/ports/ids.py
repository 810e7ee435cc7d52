from typing import Protocol


class IdGeneratorPort(Protocol):
    def generate(self) -> str:
        """Return a short, collision-resistant random identifier."""
        ...
