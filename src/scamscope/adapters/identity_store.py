"""Anonymous identity bootstrap.

An identity is issued once and kept in a local session file so the same
conversation log is reopened on the next start.
"""

from __future__ import annotations

import json
import logging
import os
import uuid

from scamscope.core.errors import IdentityError
from scamscope.core.models import Identity

LOGGER = logging.getLogger(__name__)


def load_or_create_identity(session_path: str) -> Identity:
    """Return the identity stored at ``session_path``, issuing one if missing."""

    if os.path.exists(session_path):
        try:
            with open(session_path, "r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, ValueError) as exc:
            raise IdentityError(f"Failed to read session file {session_path}: {exc}") from exc
        user_id = data.get("user_id") if isinstance(data, dict) else None
        if not isinstance(user_id, str) or not user_id:
            raise IdentityError(f"Session file {session_path} has no user_id")
        return Identity(user_id=user_id)

    identity = Identity(user_id=uuid.uuid4().hex)
    directory = os.path.dirname(session_path)
    try:
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(session_path, "w", encoding="utf-8") as handle:
            json.dump({"user_id": identity.user_id}, handle)
    except OSError as exc:
        raise IdentityError(f"Failed to authenticate: {exc}") from exc

    LOGGER.info("Issued new anonymous identity")
    return identity
