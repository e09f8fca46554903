"""
Utility modules for the Trustay rental workspace
"""
from .config_loader import AppConfig, load_app_config
from .formatters import (
    format_billing_period,
    format_currency,
    translate_bill_status,
    translate_contract_status,
)

__all__ = [
    'AppConfig',
    'load_app_config',
    'format_billing_period',
    'format_currency',
    'translate_bill_status',
    'translate_contract_status',
]
