"""
Trustay rental workspace: backend integrations, client stores, contract signing
and structured chat messages for the Trustay rental platform.
"""

__version__ = "0.1.0"
