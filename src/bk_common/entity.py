"""Base for persisted domain entities."""

from dataclasses import dataclass


@dataclass(kw_only=True)
class AbstractEntity:
    id: int | None = None
    version: int = 0  # optimistic-lock counter, bumped by every persisted update

    def validate(self) -> None:
        """Raise RequiredFieldsMissingError when mandatory fields are empty."""

    @classmethod
    def entity_name(cls) -> str:
        """Human readable type name used in messages: PickupLocation -> 'pickup location'."""
        name = cls.__name__
        words: list[str] = []
        current = ""
        for ch in name:
            if ch.isupper() and current:
                words.append(current)
                current = ch
            else:
                current += ch
        words.append(current)
        return " ".join(w.lower() for w in words)
