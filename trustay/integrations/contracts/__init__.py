"""
Contracts (data models).

This folder defines the request/response shapes exchanged with the Trustay backend:
- Contract, bill, rental and roommate-application records
- Request payloads (create / sign / respond / send message)
- Validation helpers returning lists of error strings

Both mock and real HTTP clients use these contracts, so stores and the API layer
never deal with raw camelCase dicts.
"""
