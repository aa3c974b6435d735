"""
Máquina de ações de Flow (FlowActionStateMachine).

Recebe uma ação já descriptografada, aplica a regra declarada em
ACTION_RULES (sessão obrigatória, gravação de respostas) e delega ao
handler da ação. Sessões e respostas vêm de stores injetados; nenhum
estado é mantido na instância entre requisições.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from app.sessions.answers import build_answer_records
from app.sessions.models import FlowSession
from fsm.errors import InvalidFlowRequestError, SessionNotFoundError
from fsm.rules.routing import ScreenRouter, no_routing, resolve_route
from fsm.transitions.rules import get_action_rule, validate_action_rules
from fsm.types.action import FlowAction, FlowActionRequest, FlowScreenResponse

if TYPE_CHECKING:
    from app.protocols.flow_answer_store import FlowAnswerStoreProtocol
    from app.protocols.flow_session_store import FlowSessionStoreProtocol
    from app.services.screen_data_provider import ScreenDataProvider

logger = logging.getLogger(__name__)

DEFAULT_PROTOCOL_VERSION = "7.2"
DEFAULT_FIRST_SCREEN = "FORM"
DEFAULT_COMPLETION_SCREEN = "SUCCESS"
DEFAULT_SESSION_TTL_SECONDS = 24 * 60 * 60
COMPLETION_MESSAGE = "Flow completed successfully"

ActionHandler = Callable[
    [FlowActionRequest, FlowSession | None],
    Awaitable[FlowScreenResponse],
]


def validate_handler_map(handlers: dict[FlowAction, Any]) -> list[str]:
    """
    Verifica que toda ação tem exatamente um handler.

    Returns:
        Lista de erros encontrados (vazia se válido)
    """
    errors = [
        f"Ação {action.name} sem handler"
        for action in FlowAction
        if action not in handlers
    ]
    errors.extend(
        f"Handler registrado para ação desconhecida: {key!r}"
        for key in handlers
        if not isinstance(key, FlowAction)
    )
    return errors


def _utc_iso() -> str:
    return datetime.now(UTC).isoformat()


def _require(session: FlowSession | None, request: FlowActionRequest) -> FlowSession:
    if session is None:
        raise SessionNotFoundError(request.session_id)
    return session


class FlowActionStateMachine:
    """
    Máquina de estados das ações de Flow.

    INIT cria a sessão na primeira tela. BACK volta para a tela pedida.
    DATA_EXCHANGE grava respostas e roteia. COMPLETE grava e encerra.
    ping responde o health check sem tocar em stores.
    """

    def __init__(
        self,
        session_store: FlowSessionStoreProtocol,
        answer_store: FlowAnswerStoreProtocol,
        screen_data_provider: ScreenDataProvider,
        *,
        protocol_version: str = DEFAULT_PROTOCOL_VERSION,
        first_screen: str = DEFAULT_FIRST_SCREEN,
        completion_screen: str = DEFAULT_COMPLETION_SCREEN,
        session_ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS,
        router: ScreenRouter | None = None,
    ) -> None:
        self._sessions = session_store
        self._answers = answer_store
        self._screen_data = screen_data_provider
        self._version = protocol_version
        self._first_screen = first_screen
        self._completion_screen = completion_screen
        self._ttl_seconds = session_ttl_seconds
        self._router: ScreenRouter = router or no_routing

        self._handlers: dict[FlowAction, ActionHandler] = {
            FlowAction.INIT: self._handle_init,
            FlowAction.BACK: self._handle_back,
            FlowAction.DATA_EXCHANGE: self._handle_data_exchange,
            FlowAction.COMPLETE: self._handle_complete,
            FlowAction.PING: self._handle_ping,
        }
        errors = validate_handler_map(self._handlers) + validate_action_rules()
        if errors:
            raise ValueError("; ".join(errors))

    @property
    def protocol_version(self) -> str:
        return self._version

    async def handle(self, request: FlowActionRequest) -> FlowScreenResponse:
        """
        Processa uma ação e devolve a resposta de tela.

        Raises:
            SessionNotFoundError: Ação exige sessão e ela não existe
            InvalidFlowRequestError: Campo obrigatório ausente
            InfrastructureError: Falha de store (propagada)
        """
        rule = get_action_rule(request.action)

        session: FlowSession | None = None
        if rule.requires_session:
            session = await self._load_session(request.session_id)

        if rule.records_answers and session is not None:
            await self._record_answers(session, request)

        response = await self._handlers[request.action](request, session)

        logger.info(
            "flow_action_handled",
            extra={
                "component": "flow_state_machine",
                "action": request.action.value,
                "next_screen": response.screen,
                "tenant_id": request.tenant_id,
            },
        )
        return response

    async def _load_session(self, session_id: str | None) -> FlowSession:
        if not session_id:
            raise SessionNotFoundError(session_id)
        session = await self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    async def _record_answers(
        self,
        session: FlowSession,
        request: FlowActionRequest,
    ) -> None:
        if not request.payload:
            return
        screen = request.screen or session.current_screen
        records = build_answer_records(session, screen, request.payload)
        await self._answers.append(records)

    async def _update_session(
        self,
        session_id: str,
        mutator: Callable[[FlowSession], None],
    ) -> FlowSession:
        updated = await self._sessions.update(session_id, mutator)
        if updated is None:
            # Expirou entre a leitura e a escrita
            raise SessionNotFoundError(session_id)
        return updated

    def _response(
        self,
        screen: str,
        data: dict[str, Any],
        session_id: str,
    ) -> FlowScreenResponse:
        return FlowScreenResponse(
            version=self._version,
            screen=screen,
            data=data,
            session_id=session_id,
        )

    async def _handle_init(
        self,
        request: FlowActionRequest,
        session: FlowSession | None,
    ) -> FlowScreenResponse:
        session_id = request.session_id or uuid.uuid4().hex
        started = FlowSession.start(
            session_id=session_id,
            flow_id=request.flow_token,
            first_screen=self._first_screen,
            ttl_seconds=self._ttl_seconds,
            tenant_id=request.tenant_id,
            session_data=request.payload,
        )
        await self._sessions.upsert(started)

        data = await self._screen_data.get_screen_data(self._first_screen)
        return self._response(self._first_screen, data, session_id)

    async def _handle_back(
        self,
        request: FlowActionRequest,
        session: FlowSession | None,
    ) -> FlowScreenResponse:
        session = _require(session, request)
        target = request.screen
        if not target:
            raise InvalidFlowRequestError("BACK requires a screen")

        await self._update_session(session.session_id, lambda s: s.move_to(target))

        data = await self._screen_data.get_screen_data(target)
        return self._response(target, data, session.session_id)

    async def _handle_data_exchange(
        self,
        request: FlowActionRequest,
        session: FlowSession | None,
    ) -> FlowScreenResponse:
        session = _require(session, request)
        screen = request.screen or session.current_screen
        next_screen = await resolve_route(self._router, session, screen, request.payload)

        def _advance(current: FlowSession) -> None:
            if next_screen is None:
                current.mark_completed()
            else:
                current.move_to(next_screen)

        await self._update_session(session.session_id, _advance)

        data: dict[str, Any] = {
            "processed": True,
            "screen": screen,
            "timestamp": _utc_iso(),
        }
        if next_screen is None:
            return self._response(self._completion_screen, data, session.session_id)

        data.update(await self._screen_data.get_screen_data(next_screen))
        return self._response(next_screen, data, session.session_id)

    async def _handle_complete(
        self,
        request: FlowActionRequest,
        session: FlowSession | None,
    ) -> FlowScreenResponse:
        session = _require(session, request)
        await self._update_session(session.session_id, lambda s: s.mark_completed())

        data = {"message": COMPLETION_MESSAGE, "completed_at": _utc_iso()}
        return self._response(self._completion_screen, data, session.session_id)

    async def _handle_ping(
        self,
        request: FlowActionRequest,
        session: FlowSession | None,
    ) -> FlowScreenResponse:
        return FlowScreenResponse.health_check(self._version)


def create_flow_state_machine(
    session_store: FlowSessionStoreProtocol,
    answer_store: FlowAnswerStoreProtocol,
    screen_data_provider: ScreenDataProvider,
    **options: Any,
) -> FlowActionStateMachine:
    """
    Factory function para criar a máquina de ações.

    Args:
        session_store: Store de sessões (update atômico)
        answer_store: Store append-only de respostas
        screen_data_provider: Provedor de dados de tela
        **options: Versão, telas, TTL e roteador

    Returns:
        FlowActionStateMachine configurada
    """
    return FlowActionStateMachine(
        session_store,
        answer_store,
        screen_data_provider,
        **options,
    )
