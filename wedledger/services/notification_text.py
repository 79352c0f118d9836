"""
Localized notification titles and bodies.

``compose_notification`` never raises: unknown languages fall back to the
configured default, unknown types to ``(type, "")``, missing names to a
placeholder.
"""
from typing import NamedTuple

from ..core.config import settings


class NotificationText(NamedTuple):
    title: str
    content: str


PLACEHOLDER_NAME = {"en": "Someone", "he": "מישהו"}

PERMISSION_LABELS = {
    "en": {"read": "read-only", "read_write": "read & write"},
    "he": {"read": "קריאה בלבד", "read_write": "קריאה וכתיבה"},
}

TRANSLATIONS = {
    "en": {
        "invite": (
            "New Invite Request",
            "{owner} has invited you to share their ledger with {permission} permission.",
        ),
        "permission_update": (
            "Permission Updated",
            "{viewer} has changed their access to your ledger to {permission}.",
        ),
        "revoked": (
            "Access Revoked",
            "{user} has revoked access to the shared ledger.",
        ),
        "viewed": (
            "Ledger Viewed",
            "{viewer} is viewing your ledger.",
        ),
        "accepted": (
            "Invite Accepted",
            "{viewer} has accepted your invite and can now access your ledger.",
        ),
    },
    "he": {
        "invite": (
            "הזמנה חדשה",
            "{owner} הזמין אותך לצפות בספר שלו עם הרשאת {permission}.",
        ),
        "permission_update": (
            "הרשאה עודכנה",
            "{viewer} שינה את הגישה שלו לספר שלך ל{permission}.",
        ),
        "revoked": (
            "גישה בוטלה",
            "{user} ביטל את הגישה לספר המשותף.",
        ),
        "viewed": (
            "הספר נצפה",
            "{viewer} צופה בספר שלך.",
        ),
        "accepted": (
            "הזמנה אושרה",
            "{viewer} אישר את ההזמנה שלך ויכול כעת לגשת לספר שלך.",
        ),
    },
}


def resolve_language(language: str | None) -> str:
    if language in TRANSLATIONS:
        return language
    if settings.DEFAULT_LANGUAGE in TRANSLATIONS:
        return settings.DEFAULT_LANGUAGE
    return "he"


def compose_notification(
    type: str,
    language: str | None = None,
    *,
    owner_name: str | None = None,
    viewer_name: str | None = None,
    user_name: str | None = None,
    permission: str | None = None,
) -> NotificationText:
    lang = resolve_language(language)
    entry = TRANSLATIONS[lang].get(str(type))
    if entry is None:
        return NotificationText(title=str(type), content="")

    placeholder = PLACEHOLDER_NAME[lang]
    # Anything other than "read" is shown as read & write
    permission_key = "read" if str(permission) == "read" else "read_write"
    title, template = entry
    content = template.format(
        owner=owner_name or placeholder,
        viewer=viewer_name or placeholder,
        user=user_name or placeholder,
        permission=PERMISSION_LABELS[lang][permission_key],
    )
    return NotificationText(title=title, content=content)
