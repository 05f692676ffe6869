"""
claimdesk - claims back office for an insurance agent dashboard.

Claim filing workflow with simulated decisions, and a claim store
persisted to local key-value storage.
"""

__version__ = "1.0.0"
