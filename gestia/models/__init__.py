from gestia.models.company import Company, SubscriptionPlan, SubscriptionStatus, TenantOwned
from gestia.models.user import User, Role
from gestia.models.customer import Customer
from gestia.models.appointment import Appointment, AppointmentStatus
from gestia.models.conversation import (
    Conversation, ConversationStatus, Channel,
    Message, MessageDirection, MessageStatus,
)
