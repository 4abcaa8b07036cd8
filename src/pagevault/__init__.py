"""PageVault — a small multi-tenant page store.

Registered users create, read, update and delete text pages that belong
only to them. Authentication is stateless (signed JWT bearer tokens) and
every page query is scoped to the authenticated owner.
"""

__version__ = "0.1.0"
