from __future__ import annotations

from typing import Optional

from django.conf import settings

from .puzzles import RiddleGame


# PUBLIC_INTERFACE
class DjangoSessionStore:
    """SessionStore backed by a Django request session.

    Values are kept as text so the game layer stays unaware of the session
    serializer in use.
    """

    def __init__(self, session):
        self._session = session

    def get(self, key: str) -> Optional[str]:
        value = self._session.get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        self._session[key] = value

    def remove(self, key: str) -> None:
        self._session.pop(key, None)


# PUBLIC_INTERFACE
def game_for_request(request) -> RiddleGame:
    """Load the RiddleGame bound to the caller's session, using RIDDLES_* settings."""
    store = DjangoSessionStore(request.session)
    return RiddleGame.from_store(
        store,
        words_key=settings.RIDDLES_WORDS_KEY,
        state_key=settings.RIDDLES_STATE_KEY,
        max_words=settings.RIDDLES_MAX_WORDS,
    )
