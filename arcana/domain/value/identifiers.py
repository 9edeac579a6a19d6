"""Strongly typed identifiers for domain entities.

Using NewType prevents mixing up different entity IDs.
"""

from typing import NewType
from uuid import UUID

UserId = NewType("UserId", UUID)

# Opaque random string carried (signed) in the session cookie
AuthSessionId = NewType("AuthSessionId", str)
