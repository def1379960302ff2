from showcase_api.schemas.notification import (
    RegistrationMessage,
    NotificationIn,
    NotificationSentOut,
    PresenceOut,
)

__all__ = [
    "RegistrationMessage",
    "NotificationIn",
    "NotificationSentOut",
    "PresenceOut",
]
