from fastapi import APIRouter
from . import auth, invites, connections, notifications, users, family_members, gifts, future_events, event_types, analytics

router = APIRouter()

router.include_router(auth.router, prefix="/otp", tags=["OTP"])
router.include_router(invites.router, prefix="/invites", tags=["Invites"])
router.include_router(connections.router, prefix="/connections", tags=["Connections"])
router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(family_members.router, prefix="/family-members", tags=["Family members"])
router.include_router(gifts.router, prefix="/gifts", tags=["Gifts"])
router.include_router(future_events.router, prefix="/future-events", tags=["Future events"])
router.include_router(event_types.router, prefix="/event-types", tags=["Event types"])
router.include_router(analytics.router, prefix="/analytics", tags=["Analytics"])
