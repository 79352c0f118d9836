from ..models.user import User
from ..models.family_member import FamilyMember
from ..models.gift import Gift
from ..models.connection import UserConnection, ConnectionStatus, Permission
from ..models.notification import Notification, NotificationType
from ..models.future_event import FutureEvent
from ..models.event_type import EventType
from ..db.base_class import Base
