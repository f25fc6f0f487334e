"""Redis store of in-progress profile collection sessions, keyed by user.

Sessions are transient: they are dropped on completion, on cancel, or by
Redis once idle for longer than the configured TTL. Each write refreshes the
TTL. Applying an answer is a WATCH/MULTI transaction, so two replies racing
on the same session cannot both be applied.
"""

import json
import logging

import redis

from mortgage_calc.config import settings
from mortgage_calc.engine import collector
from mortgage_calc.engine.collector import ProfileSession, StepOutcome

logger = logging.getLogger(__name__)

KEY_PREFIX = "mortgage_calc:session"


class SessionConflictError(Exception):
    """The session changed while an answer was being applied to it."""


def get_redis() -> redis.Redis:
    return redis.from_url(settings.redis_url, decode_responses=True)


class SessionStore:
    def __init__(self, client: redis.Redis, ttl_seconds: int | None = None):
        self.client = client
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.session_ttl_minutes * 60

    @staticmethod
    def key(user_id: str) -> str:
        return f"{KEY_PREFIX}:{user_id}"

    @staticmethod
    def _dumps(session: ProfileSession) -> str:
        return json.dumps(session.to_dict())

    @staticmethod
    def _loads(raw: str) -> ProfileSession:
        return ProfileSession.from_dict(json.loads(raw))

    def get(self, user_id: str) -> ProfileSession | None:
        raw = self.client.get(self.key(user_id))
        return None if raw is None else self._loads(raw)

    def put(self, session: ProfileSession) -> None:
        self.client.setex(self.key(session.user_id), self.ttl_seconds, self._dumps(session))

    def discard(self, user_id: str) -> bool:
        return self.client.delete(self.key(user_id)) > 0

    def advance(self, user_id: str, answer: str) -> StepOutcome | None:
        """Apply ``answer`` to the user's session and store the result atomically.

        A completed session is removed rather than stored. Returns None if the
        user has no session; raises SessionConflictError if another write to
        the session landed first.
        """
        key = self.key(user_id)
        with self.client.pipeline() as pipe:
            try:
                pipe.watch(key)
                raw = pipe.get(key)
                if raw is None:
                    return None
                outcome = collector.advance(self._loads(raw), answer)
                pipe.multi()
                if outcome.session.is_complete:
                    pipe.delete(key)
                else:
                    pipe.setex(key, self.ttl_seconds, self._dumps(outcome.session))
                pipe.execute()
            except redis.WatchError as e:
                logger.info("Concurrent update of session for user %s", user_id)
                raise SessionConflictError(f"Session for {user_id} changed during the reply") from e
        return outcome
