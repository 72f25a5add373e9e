from .user import User
from .event import Event, EventCategory, EventSubcategory, EventJury, EventType, EventStatus
from .invitation_code import InvitationCode
from .registration import Registration, RegistrantStatus, RegistrationState
