"""
Per-resource stores holding loading / error / data state on top of the
integration clients.
"""

from .bill_store import BillStore
from .chat_store import ChatStore
from .contract_store import ContractStore
from .notification_store import NotificationStore
from .rental_store import RentalStore
from .roommate_application_store import RoommateApplicationStore

__all__ = [
    "BillStore",
    "ChatStore",
    "ContractStore",
    "NotificationStore",
    "RentalStore",
    "RoommateApplicationStore",
]
