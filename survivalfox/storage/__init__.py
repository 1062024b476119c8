"""File-based on-device storage.

Data layout (one flat file per key under the data directory):

    data/
      survivalfox_session_id    Durable per-device session id (UUID4)
      survivalfox_thread_id     Current conversation id, absent for a new one
      survivalfox_messages_v1   Chat log, JSON array of ChatMessage
      survivalfox_game_id       Selected game theme

The stores are thin wrappers over one LocalStorage. They hold no state of
their own; the ConversationController owns the in-memory copies.
"""

# Re-export all public symbols so `from survivalfox.storage import ...` works.

from .core import (  # noqa: F401
    LS_GAME_ID,
    LS_MESSAGES,
    LS_SESSION,
    LS_THREAD,
    LocalStorage,
)

from .identity import IdentityStore  # noqa: F401

from .messages import ConversationStore  # noqa: F401

from .games import GameStore  # noqa: F401
