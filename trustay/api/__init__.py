"""HTTP surface of the Trustay backend-for-frontend."""
