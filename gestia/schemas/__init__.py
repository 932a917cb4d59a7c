"""
Schemas module
"""

from gestia.schemas.auth import LoginRequest, MeResponse, RegisterRequest, TokenResponse
from gestia.schemas.appointment import (
    AppointmentCreate, AppointmentRange, AppointmentRead, AppointmentReschedule,
    AppointmentUpdate,
)
from gestia.schemas.customer import CustomerCreate, CustomerRead, CustomerUpdate
from gestia.schemas.employee import EmployeeCreate, EmployeeRead, EmployeeUpdate
from gestia.schemas.inbox import (
    ConversationDetail, ConversationRead, ConversationStart, ConversationSummary,
    MessageRead, SendMessage,
)
from gestia.schemas.validation import parse_input

__all__ = [
    "AppointmentCreate",
    "AppointmentRange",
    "AppointmentRead",
    "AppointmentReschedule",
    "AppointmentUpdate",
    "ConversationDetail",
    "ConversationRead",
    "ConversationStart",
    "ConversationSummary",
    "CustomerCreate",
    "CustomerRead",
    "CustomerUpdate",
    "EmployeeCreate",
    "EmployeeRead",
    "EmployeeUpdate",
    "LoginRequest",
    "MeResponse",
    "MessageRead",
    "RegisterRequest",
    "SendMessage",
    "TokenResponse",
    "parse_input",
]
