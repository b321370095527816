"""
identity_probe.identity

User-management layer (store façade) built on the persistence package.

Responsibilities:
- Password hashing and password policy.
- User validation (names, emails, uniqueness).
- The `UserManager` operations: create, find, update.
"""

# Package marker.
