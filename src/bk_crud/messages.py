"""User-facing texts for CRUD outcomes and confirmation dialogs."""

from dataclasses import dataclass


class CrudErrorMessage:
    ENTITY_NOT_FOUND = "The selected entity was not found."

    CONCURRENT_UPDATE = (
        "Somebody else might have updated the data. Please refresh and try again."
    )

    OPERATION_PREVENTED_BY_REFERENCES = (
        "The operation can not be executed as there are references to entity in the database."
    )

    REQUIRED_FIELDS_MISSING = "Please fill out all required fields before proceeding."


_HTTP_STATUS = {
    CrudErrorMessage.ENTITY_NOT_FOUND: 404,
    CrudErrorMessage.CONCURRENT_UPDATE: 409,
    CrudErrorMessage.OPERATION_PREVENTED_BY_REFERENCES: 409,
    CrudErrorMessage.REQUIRED_FIELDS_MISSING: 422,
}


def http_status_for(message: str) -> int:
    """HTTP status for a reported failure; rule messages map to 422."""
    return _HTTP_STATUS.get(message, 422)


@dataclass(frozen=True)
class Message:
    caption: str
    ok_text: str
    cancel_text: str
    message: str


@dataclass(frozen=True)
class MessageTemplate:
    caption: str
    ok_text: str
    cancel_text: str
    template: str

    def create_message(self, *parameters: object) -> Message:
        text = self.template % parameters if parameters else self.template
        return Message(self.caption, self.ok_text, self.cancel_text, text)


CONFIRM_CAPTION_DELETE = "Confirm Delete"
CONFIRM_MESSAGE_DELETE = (
    "Are you sure you want to delete the selected Item? This action cannot be undone."
)
BUTTON_CAPTION_DELETE = "Delete"
BUTTON_CAPTION_CANCEL = "Cancel"

UNSAVED_CHANGES = MessageTemplate(
    "Unsaved Changes",
    "Discard",
    "Continue Editing",
    "There are unsaved modifications to the %s. Discard changes?",
)

CONFIRM_DELETE = MessageTemplate(
    CONFIRM_CAPTION_DELETE,
    BUTTON_CAPTION_DELETE,
    BUTTON_CAPTION_CANCEL,
    CONFIRM_MESSAGE_DELETE,
)
