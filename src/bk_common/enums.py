"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum


class OrderState(str, Enum):
    NEW = "NEW"
    CONFIRMED = "CONFIRMED"
    READY = "READY"
    DELIVERED = "DELIVERED"
    PROBLEM = "PROBLEM"
    CANCELLED = "CANCELLED"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class Role(str, Enum):
    BARISTA = "barista"
    BAKER = "baker"
    ADMIN = "admin"
