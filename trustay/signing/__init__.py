from .workflow import (
    ContractSigningWorkflow,
    SignatureStatus,
    SigningPhase,
    can_sign,
    next_status_after_signature,
    signature_status,
)

__all__ = [
    "ContractSigningWorkflow", "SignatureStatus", "SigningPhase",
    "can_sign", "next_status_after_signature", "signature_status",
]
