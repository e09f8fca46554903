#!/usr/bin/env python3
"""
Run the full dual-party contract signing flow and a roommate application
decision against the in-memory backend, printing each stage to the terminal.

Usage (from repo root):
  python scripts/run_signing_demo.py
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from trustay.integrations.clients.mocks import InMemoryBackend, mock_clients
from trustay.integrations.contracts.roommates import RespondToApplicationRequest
from trustay.messaging import RoommateNotifier, decode_structured_message
from trustay.signing import ContractSigningWorkflow
from trustay.stores import ChatStore, ContractStore, RoommateApplicationStore
from trustay.toasts import ToastQueue

DEMO_SIGNATURE = "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="


def setup_logging():
    """Log to terminal at INFO so every stage is visible."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )


def print_stage(title: str, data: dict | list | str):
    """Print a stage header and data to the terminal."""
    print("\n" + "=" * 60)
    print(f"  {title}")
    print("=" * 60)
    if isinstance(data, (dict, list)):
        print(json.dumps(data, indent=2, ensure_ascii=False, default=str))
    else:
        print(data)
    print()


async def sign_as(backend: InMemoryBackend, user_id: str, role: str, contract_id: str) -> dict:
    store = ContractStore(mock_clients(backend, user_id).contracts)
    toasts = ToastQueue()
    await store.load_by_id(contract_id)
    workflow = ContractSigningWorkflow(store.current, role, store, toasts=toasts)

    await workflow.start_signing()
    print_stage(f"{role.upper()}: OTP requested", workflow.snapshot())

    # The mock backend keeps the code it "emailed"
    workflow.set_otp(backend.issued_otps[(contract_id, user_id)])
    await workflow.confirm(DEMO_SIGNATURE)
    return {**workflow.snapshot(), "toasts": [t.to_dict() for t in toasts.drain()]}


async def main():
    setup_logging()
    backend = InMemoryBackend.with_demo_data()

    landlord = mock_clients(backend, "landlord-1")
    contract = await landlord.contracts.get_contract("contract-1")
    print_stage("CONTRACT BEFORE SIGNING", {"id": contract.id, "status": contract.status.value})

    print_stage("LANDLORD SIGNED", await sign_as(backend, "landlord-1", "landlord", "contract-1"))
    print_stage("TENANT SIGNED", await sign_as(backend, "tenant-1", "tenant", "contract-1"))

    contracts = ContractStore(landlord.contracts)
    await contracts.activate("contract-1")
    print_stage("CONTRACT ACTIVATED", {"status": contracts.current.status.value if contracts.current else None,
                                       "error": contracts.submit_error})

    # --- Roommate application: tenant approves, applicant is notified over chat ---
    tenant = mock_clients(backend, "tenant-1")
    applications = RoommateApplicationStore(tenant.roommate_applications)
    application = await applications.respond(
        "application-1", RespondToApplicationRequest.decision(approve=True, as_landlord=False)
    )
    sent = await RoommateNotifier(tenant.chat).notify_response(application, approve=True)
    print_stage("APPLICATION APPROVED BY TENANT", {"status": application.status.value, "notification_sent": sent})

    chat = ChatStore(mock_clients(backend, "applicant-1").chat)
    await chat.load_conversations()
    conversation_id = chat.conversations[0].conversation_id
    await chat.load_messages(conversation_id)
    latest = chat.messages[conversation_id][-1]
    structured = decode_structured_message(latest.content)
    print_stage("APPLICANT INBOX", {
        "raw": latest.content,
        "display_text": chat.display_text(latest),
        "structured": structured.to_wire() if structured else None,
    })


if __name__ == "__main__":
    asyncio.run(main())
