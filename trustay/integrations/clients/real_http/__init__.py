"""
Real HTTP integration clients.

These clients talk to the Trustay backend over HTTP through one shared
BackendHttpClient (base URL, timeout, bearer token, one-shot token refresh).

Important:
- Must implement the same interfaces as the mock clients
- Must return data shaped according to trustay/integrations/contracts/*

Switching:
The selection of mock vs real clients happens in trustay.integrations.clients.select_backend only.
"""

from .base import BackendHttpClient, TokenStore
from .bills import RealBillsClient
from .chat import RealChatClient
from .contracts import RealContractsClient
from .notifications import RealNotificationsClient
from .rentals import RealRentalsClient
from .roommate_applications import RealRoommateApplicationsClient

__all__ = [
    "BackendHttpClient", "TokenStore",
    "RealBillsClient", "RealChatClient", "RealContractsClient",
    "RealNotificationsClient", "RealRentalsClient", "RealRoommateApplicationsClient",
]
