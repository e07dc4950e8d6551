"""Import all models so SQLAlchemy metadata is fully registered."""

from saturday.db.base import Base

from saturday.models.audit import ActivityLog
from saturday.models.availability import UserAvailability
from saturday.models.conversation import Conversation, ConversationParticipant, Message
from saturday.models.enums import AvailabilityState, MembershipRole
from saturday.models.organization import Organization
from saturday.models.pregame import Pregame
from saturday.models.review import Review
from saturday.models.school import School, SchoolMembership
from saturday.models.user import User

__all__ = [
    "ActivityLog",
    "AvailabilityState",
    "Base",
    "Conversation",
    "ConversationParticipant",
    "MembershipRole",
    "Message",
    "Organization",
    "Pregame",
    "Review",
    "School",
    "SchoolMembership",
    "User",
    "UserAvailability",
]
