"""
Tests for the onboarding state machine
"""
import asyncio

import httpx
import pytest

from app import config
from app.services import session_orchestrator
from app.services.session_orchestrator import (
    DemoApiBackend,
    DemoRequestError,
    SessionOrchestrator,
    SetupStep,
    build_demo_orchestrator,
    run_demo,
)


class FakeBackend:
    def __init__(self, context_error=None, session_error=None, session_token="tok-1"):
        self.context_error = context_error
        self.session_error = session_error
        self.session_token = session_token
        self.context_payloads = []
        self.session_payloads = []

    async def generate_context(self, payload):
        self.context_payloads.append(payload)
        if self.context_error:
            raise DemoRequestError(self.context_error)
        return {"contextId": "ctx-1", "businessName": "Acme"}

    async def start_session(self, payload):
        self.session_payloads.append(payload)
        if self.session_error:
            raise DemoRequestError(self.session_error)
        return {"session_token": self.session_token}

    async def list_avatars(self):
        return [
            {"id": "avatar-1", "name": "Ann", "default_voice": {"id": "voice-1", "name": "Ann"}},
            {"id": "avatar-2", "name": "Wayne"},
        ]


def make_orchestrator(backend=None, **kwargs):
    kwargs.setdefault("user_name", "Dana")
    kwargs.setdefault("business_url", "acme.com")
    return SessionOrchestrator(backend or FakeBackend(), **kwargs)


def test_successful_chain_reaches_session():
    steps = []
    orchestrator = make_orchestrator(on_change=lambda o: steps.append(o.step))

    asyncio.run(orchestrator.submit())

    assert orchestrator.step == SetupStep.SESSION
    assert orchestrator.session_token == "tok-1"
    assert orchestrator.context_id == "ctx-1"
    assert orchestrator.business_name == "Acme"
    assert orchestrator.error is None
    assert steps[0] == SetupStep.GENERATING
    assert steps[-1] == SetupStep.SESSION


def test_bare_domain_normalized_before_any_call():
    backend = FakeBackend()
    asyncio.run(make_orchestrator(backend).submit())
    assert backend.context_payloads[0]["businessUrl"] == "https://acme.com"


def test_progress_statuses():
    statuses = []
    orchestrator = make_orchestrator(on_change=lambda o: statuses.append(o.status.step))
    asyncio.run(orchestrator.submit())
    assert "Analyzing website" in statuses
    assert "Creating your AI representative" in statuses
    assert orchestrator.status.detail == "Setting up sales agent for Acme..."


@pytest.mark.parametrize("backend", [
    FakeBackend(context_error="Could not access the website"),
    FakeBackend(session_error="Insufficient credits"),
    FakeBackend(session_token=""),
])
def test_any_failure_returns_to_form_with_message(backend):
    orchestrator = make_orchestrator(backend)
    asyncio.run(orchestrator.submit())

    assert orchestrator.step == SetupStep.FORM
    assert orchestrator.error
    assert orchestrator.session_token == ""
    assert orchestrator.context_id is None
    # form values survive
    assert orchestrator.user_name == "Dana"
    assert orchestrator.business_url == "acme.com"


def test_session_error_message_surfaced_verbatim():
    orchestrator = make_orchestrator(FakeBackend(session_error="Insufficient credits"))
    asyncio.run(orchestrator.submit())
    assert orchestrator.error == "Insufficient credits"


def test_empty_form_does_not_start():
    backend = FakeBackend()
    orchestrator = make_orchestrator(backend, user_name="  ")
    asyncio.run(orchestrator.submit())

    assert orchestrator.step == SetupStep.FORM
    assert orchestrator.error
    assert backend.context_payloads == []


def test_session_end_shows_embed_screen_then_start_over():
    orchestrator = make_orchestrator()
    asyncio.run(orchestrator.submit())

    orchestrator.session_stopped()
    assert orchestrator.step == SetupStep.ENDED
    assert orchestrator.session_token == ""
    assert 'src="https://embed.liveavatar.com/v1/ctx-1"' in orchestrator.embed_code()
    assert 'title="LiveAvatar - Acme"' in orchestrator.embed_code()

    orchestrator.start_over()
    assert orchestrator.step == SetupStep.FORM
    assert orchestrator.context_id is None
    assert orchestrator.business_name == ""
    assert orchestrator.embed_code() == ""


def test_session_end_without_context_goes_to_form():
    orchestrator = make_orchestrator()
    orchestrator.session_stopped()
    assert orchestrator.step == SetupStep.FORM


def test_chat_again_reruns_chain():
    backend = FakeBackend()
    orchestrator = make_orchestrator(backend)
    asyncio.run(orchestrator.submit())
    orchestrator.session_stopped()

    asyncio.run(orchestrator.chat_again())

    assert orchestrator.step == SetupStep.SESSION
    assert len(backend.context_payloads) == 2


def test_avatars_loaded_and_first_selected():
    backend = FakeBackend()
    orchestrator = make_orchestrator(backend)
    asyncio.run(orchestrator.load_avatars())

    assert orchestrator.selected_avatar.id == "avatar-1"
    asyncio.run(orchestrator.submit())
    assert backend.context_payloads[0]["avatarId"] == "avatar-1"
    assert backend.context_payloads[0]["voiceId"] == "voice-1"
    assert backend.session_payloads[0] == {"contextId": "ctx-1", "avatarId": "avatar-1", "voiceId": "voice-1"}


def test_select_avatar_without_default_voice():
    backend = FakeBackend()
    orchestrator = make_orchestrator(backend)
    asyncio.run(orchestrator.load_avatars())
    orchestrator.select_avatar("avatar-2")
    asyncio.run(orchestrator.submit())
    assert backend.context_payloads[0]["voiceId"] is None

    with pytest.raises(ValueError):
        orchestrator.select_avatar("missing")


def test_auto_start_runs_once_after_avatars_load():
    backend = FakeBackend()
    orchestrator = make_orchestrator(backend, auto_start=True)

    asyncio.run(orchestrator.load_avatars())
    assert orchestrator.step == SetupStep.SESSION
    assert not asyncio.run(orchestrator.maybe_auto_start())
    assert len(backend.context_payloads) == 1


@pytest.mark.parametrize("response", [
    httpx.Response(400, json=["bad"]),
    httpx.Response(502, text="<html>Bad gateway</html>"),
    httpx.Response(500, json={"detail": "boom"}),
])
def test_backend_error_without_message_uses_default(response):
    backend = DemoApiBackend("http://api.test", transport=httpx.MockTransport(lambda request: response))
    with pytest.raises(DemoRequestError) as exc_info:
        asyncio.run(backend.generate_context({"userName": "Dana", "businessUrl": "https://acme.com"}))
    assert str(exc_info.value) == "Failed to generate context"


def test_backend_error_message_forwarded():
    transport = httpx.MockTransport(lambda request: httpx.Response(402, json={"error": "Insufficient credits"}))
    backend = DemoApiBackend("http://api.test/", transport=transport)
    with pytest.raises(DemoRequestError) as exc_info:
        asyncio.run(backend.start_session({"contextId": "ctx-1"}))
    assert str(exc_info.value) == "Insufficient credits"


def test_demo_orchestrator_prefilled_from_environment(monkeypatch):
    monkeypatch.setattr(config, "DEMO_API_URL", "http://api.test/")
    monkeypatch.setattr(config, "AUTO_START", True)
    monkeypatch.setattr(config, "AUTO_WEBSITE_URL", "globex.io")
    monkeypatch.setattr(config, "AUTO_USER_NAME", "Lee")

    orchestrator = build_demo_orchestrator()

    assert isinstance(orchestrator.backend, DemoApiBackend)
    assert orchestrator.backend.base_url == "http://api.test"
    assert orchestrator.user_name == "Lee"
    assert orchestrator.business_url == "globex.io"
    assert orchestrator.auto_start is True
    assert orchestrator.step == SetupStep.FORM


def test_run_demo_submits_prefilled_form_without_auto_start():
    backend = FakeBackend()
    orchestrator = asyncio.run(run_demo(make_orchestrator(backend)))

    assert orchestrator.step == SetupStep.SESSION
    assert len(backend.context_payloads) == 1


def test_run_demo_auto_start_does_not_submit_twice():
    backend = FakeBackend()
    orchestrator = asyncio.run(run_demo(make_orchestrator(backend, auto_start=True)))

    assert orchestrator.step == SetupStep.SESSION
    assert len(backend.context_payloads) == 1


def test_run_demo_stops_on_failure():
    backend = FakeBackend(context_error="Could not access the website")
    orchestrator = asyncio.run(run_demo(make_orchestrator(backend)))

    assert orchestrator.step == SetupStep.FORM
    assert orchestrator.error == "Could not access the website"
    assert len(backend.context_payloads) == 1


def test_main_exits_nonzero_when_session_fails(monkeypatch, capsys):
    backend = FakeBackend(session_error="Insufficient credits")
    monkeypatch.setattr(
        session_orchestrator, "build_demo_orchestrator", lambda: make_orchestrator(backend)
    )

    with pytest.raises(SystemExit) as exc_info:
        session_orchestrator.main()

    assert exc_info.value.code == 1
    assert "Insufficient credits" in capsys.readouterr().out


def test_main_prints_embed_code(monkeypatch, capsys):
    monkeypatch.setattr(session_orchestrator, "build_demo_orchestrator", lambda: make_orchestrator())

    session_orchestrator.main()

    out = capsys.readouterr().out
    assert "Session ready for Acme" in out
    assert "https://embed.liveavatar.com/v1/ctx-1" in out
