"""
Integrations layer.
This package contains all code used to communicate with the Trustay backend API:
- contracts (leases) and electronic signing
- bills, rentals and roommate applications
- chat and notifications

Key rule:
- Stores and API routes MUST NOT call the backend directly.
- They call integration clients (under trustay/integrations/clients).
- We use MOCK clients during development and swap to REAL_HTTP clients when the backend is reachable.

Switching implementations:
- The selection of mock vs real clients happens in ONE place (trustay.integrations.clients.select_backend).
"""

from .contracts.interfaces import (
    Bill,
    BillStatus,
    Contract,
    ContractSignature,
    ContractStatus,
    ContractType,
    Page,
    PageMeta,
    Rental,
    RentalStatus,
    RoommateApplication,
    RoommateApplicationStatus,
    SignerRole,
)
from .contracts.billing import CreateBillRequest, validate_create_bill_request, validate_meter_readings
from .contracts.messaging import CreateNotificationRequest, SendMessageRequest
from .contracts.rentals import CreateRentalRequest, validate_create_rental_request
from .contracts.roommates import (
    CreateRoommateApplicationRequest,
    RespondToApplicationRequest,
    validate_application_request,
)
from .contracts.signing import (
    CreateContractRequest,
    SignContractRequest,
    is_signable_status,
    is_terminal_status,
    validate_create_contract_request,
    validate_sign_request,
)

__all__ = [
    # interfaces
    "Bill", "BillStatus", "Contract", "ContractSignature", "ContractStatus",
    "ContractType", "Page", "PageMeta", "Rental", "RentalStatus",
    "RoommateApplication", "RoommateApplicationStatus", "SignerRole",
    # billing
    "CreateBillRequest", "validate_create_bill_request", "validate_meter_readings",
    # messaging
    "CreateNotificationRequest", "SendMessageRequest",
    # rentals
    "CreateRentalRequest", "validate_create_rental_request",
    # roommates
    "CreateRoommateApplicationRequest", "RespondToApplicationRequest", "validate_application_request",
    # signing
    "CreateContractRequest", "SignContractRequest", "is_signable_status",
    "is_terminal_status", "validate_create_contract_request", "validate_sign_request",
]
