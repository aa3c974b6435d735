"""Testes do mapa de regras por ação e do roteamento de telas."""

from __future__ import annotations

import pytest

from app.sessions.models import FlowSession
from fsm.rules.routing import no_routing, resolve_route, static_routes
from fsm.transitions import (
    ACTION_RULES,
    get_action_rule,
    validate_action_rules,
)
from fsm.types import FlowAction


def test_every_action_has_a_rule() -> None:
    assert set(ACTION_RULES) == set(FlowAction)
    assert validate_action_rules() == []


def test_session_requirements() -> None:
    requiring = {action for action, rule in ACTION_RULES.items() if rule.requires_session}
    assert requiring == {FlowAction.BACK, FlowAction.DATA_EXCHANGE, FlowAction.COMPLETE}
    assert not get_action_rule(FlowAction.PING).requires_session


def test_only_submissions_record_answers() -> None:
    recording = {action for action, rule in ACTION_RULES.items() if rule.records_answers}
    assert recording == {FlowAction.DATA_EXCHANGE, FlowAction.COMPLETE}


def _session() -> FlowSession:
    return FlowSession.start(session_id="s1", flow_id="f", first_screen="FORM", ttl_seconds=60)


@pytest.mark.asyncio
async def test_default_router_ends_flow() -> None:
    assert await resolve_route(no_routing, _session(), "FORM", {}) is None


@pytest.mark.asyncio
async def test_static_routes() -> None:
    router = static_routes({"FORM": "DETAILS"})

    assert await resolve_route(router, _session(), "FORM", {}) == "DETAILS"
    assert await resolve_route(router, _session(), "DETAILS", {}) is None


@pytest.mark.asyncio
async def test_async_router_and_blank_result() -> None:
    async def router(session, screen, answers):
        return "  " if answers.get("skip") else " NEXT "

    assert await resolve_route(router, _session(), "FORM", {}) == "NEXT"
    assert await resolve_route(router, _session(), "FORM", {"skip": True}) is None
