"""Redis Flow Session Store — sessões de Flow com expiração nativa.

Atualizações usam transação otimista (WATCH/MULTI/EXEC): se outra
requisição da mesma conversa gravar no meio do read-modify-write, a
transação é refeita sobre a versão nova. Nenhum lock em processo.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from redis.exceptions import RedisError, WatchError

from app.protocols.flow_session_store import FlowSessionStoreProtocol
from app.sessions.models import FlowSession
from utils.errors import FlowStoreError, RedisConnectionError

if TYPE_CHECKING:
    from collections.abc import Callable

    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)

SESSION_PREFIX = "flow_session:"
DEFAULT_MAX_RETRIES = 5


class RedisFlowSessionStore(FlowSessionStoreProtocol):
    """Store de sessões de Flow em Redis (Upstash compatível).

    Características:
        - uma chave por sessão, TTL igual ao tempo restante até expires_at
        - upsert com SET único (atômico)
        - update com WATCH/MULTI, refeito em conflito até `max_retries`

    Args:
        redis_client: Cliente Redis assíncrono
        key_prefix: Namespace das chaves
        max_retries: Tentativas de update sob conflito
    """

    def __init__(
        self,
        redis_client: AsyncRedis[bytes],
        *,
        key_prefix: str = SESSION_PREFIX,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ) -> None:
        self._redis = redis_client
        self._key_prefix = key_prefix
        self._max_retries = max(1, max_retries)

    def _key(self, session_id: str) -> str:
        return f"{self._key_prefix}{session_id}"

    def _decode(self, session_id: str, data: bytes | str | None) -> FlowSession | None:
        if data is None:
            return None
        try:
            session = FlowSession.from_dict(json.loads(data))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
            logger.warning(
                "flow_session_decode_error",
                extra={"session_id": session_id, "error_type": type(exc).__name__},
            )
            return None
        if session.is_expired():
            return None
        return session

    async def get(self, session_id: str) -> FlowSession | None:
        try:
            data = await self._redis.get(self._key(session_id))
        except RedisError as exc:
            raise RedisConnectionError("Falha ao ler sessão de flow no Redis") from exc
        return self._decode(session_id, data)

    async def upsert(self, session: FlowSession) -> FlowSession:
        try:
            await self._redis.set(
                self._key(session.session_id),
                json.dumps(session.to_dict()),
                ex=session.seconds_to_expiry(),
            )
        except RedisError as exc:
            raise RedisConnectionError("Falha ao gravar sessão de flow no Redis") from exc
        logger.debug("flow_session_saved", extra={"session_id": session.session_id})
        return session

    async def update(
        self,
        session_id: str,
        mutator: Callable[[FlowSession], None],
    ) -> FlowSession | None:
        key = self._key(session_id)
        try:
            async with self._redis.pipeline(transaction=True) as pipe:
                for attempt in range(1, self._max_retries + 1):
                    try:
                        await pipe.watch(key)
                        session = self._decode(session_id, await pipe.get(key))
                        if session is None:
                            await pipe.unwatch()
                            return None
                        mutator(session)
                        pipe.multi()
                        pipe.set(key, json.dumps(session.to_dict()), ex=session.seconds_to_expiry())
                        await pipe.execute()
                        return session
                    except WatchError:
                        logger.info(
                            "flow_session_update_conflict",
                            extra={"session_id": session_id, "attempt": attempt},
                        )
                        await pipe.reset()
        except RedisError as exc:
            raise RedisConnectionError("Falha ao atualizar sessão de flow no Redis") from exc

        raise FlowStoreError(
            f"Conflito persistente ao atualizar sessão {session_id} "
            f"após {self._max_retries} tentativas"
        )
