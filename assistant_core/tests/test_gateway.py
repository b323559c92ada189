import asyncio
import threading
import time

import pytest

from assistant_core.api.gateway import AIGateway, GatewayState, create_gateway
from assistant_core.domain.exceptions import ConfigurationError, NetworkError
from assistant_core.domain.models import ConversationTurn, InteractionMode, Location, ModelTier, WebSource


class SettingsStub:
    gemini_api_key = "test-key"
    gemini_base_url = "https://generativelanguage.googleapis.com/v1beta"
    http_timeout = None
    deep_thought_budget = 32768


class MissingKeySettings(SettingsStub):
    gemini_api_key = None


class FakeProvider:
    name = "fake"

    def __init__(self, response=None, error=None):
        self.requests = []
        self.response = response if response is not None else {
            "candidates": [{"content": {"parts": [{"text": "ok"}]}}]
        }
        self.error = error
        self.closed = False

    async def generate_content(self, req):
        self.requests.append(req)
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return self.response

    async def aclose(self):
        self.closed = True


def _gateway(provider, cfg=SettingsStub()):
    calls = []

    def factory(api_key, settings):
        calls.append(api_key)
        return provider

    return AIGateway(cfg, client_factory=factory), calls


def test_missing_credential_fails_without_network():
    provider = FakeProvider()
    gw, calls = _gateway(provider, MissingKeySettings())
    for _ in range(2):
        with pytest.raises(ConfigurationError) as exc:
            asyncio.run(gw.chat_turn([], "Hello", InteractionMode.STANDARD))
        assert exc.value.code == "MISSING_API_KEY"
    with pytest.raises(ConfigurationError):
        asyncio.run(gw.single_shot("x"))
    with pytest.raises(ConfigurationError):
        asyncio.run(gw.grounded_query("x", True, None))
    assert calls == []
    assert provider.requests == []
    assert gw.state is GatewayState.UNINITIALIZED


def test_chat_turn_first_message():
    provider = FakeProvider()
    gw, calls = _gateway(provider)
    assert gw.state is GatewayState.UNINITIALIZED
    res = asyncio.run(gw.chat_turn([], "Hello", InteractionMode.STANDARD))
    assert res.text == "ok"
    assert res.model == "gemini-2.5-flash"
    req = provider.requests[0]
    assert req.model == "gemini-2.5-flash"
    assert req.contents == [{"role": "user", "parts": [{"text": "Hello"}]}]
    assert req.generation_config == {}
    assert req.tools == []
    assert calls == ["test-key"]
    assert gw.state is GatewayState.READY


def test_chat_turn_deep_thought_threads_history():
    provider = FakeProvider()
    gw, _ = _gateway(provider)
    history = [ConversationTurn(role="user", text="q1"), ConversationTurn(role="model", text="a1")]
    asyncio.run(gw.chat_turn(history, "q2", "Deep Thought"))
    req = provider.requests[0]
    assert req.model == "gemini-2.5-pro"
    assert req.generation_config == {"thinkingConfig": {"thinkingBudget": 32768}}
    assert [c["role"] for c in req.contents] == ["user", "model", "user"]


def test_client_created_once_across_operations():
    provider = FakeProvider()
    gw, calls = _gateway(provider)

    async def run():
        await asyncio.gather(
            gw.chat_turn([], "a"),
            gw.single_shot("b", ModelTier.PRO),
            gw.grounded_query("c"),
            gw.chat_turn([], "d", InteractionMode.FAST),
        )

    asyncio.run(run())
    assert calls == ["test-key"]
    assert len(provider.requests) == 4


def test_single_shot_returns_text():
    provider = FakeProvider()
    gw, _ = _gateway(provider)
    assert asyncio.run(gw.single_shot("Summarize", ModelTier.PRO)) == "ok"
    req = provider.requests[0]
    assert req.model == "gemini-2.5-pro"
    assert req.contents == [{"role": "user", "parts": [{"text": "Summarize"}]}]
    assert req.tools == []


def test_grounded_query_maps_with_location():
    response = {
        "candidates": [{
            "content": {"parts": [{"text": "Here"}]},
            "groundingMetadata": {"groundingChunks": [{"web": {"uri": "https://a", "title": "A"}}]},
        }]
    }
    provider = FakeProvider(response=response)
    gw, _ = _gateway(provider)
    result = asyncio.run(gw.grounded_query("museums", True, Location(latitude=48.85, longitude=2.35)))
    assert result.text == "Here"
    assert result.sources == [WebSource(uri="https://a", title="A")]
    req = provider.requests[0]
    assert req.model == "gemini-2.5-flash"
    assert [t.kind for t in req.tools] == ["google_maps", "google_search"]
    assert req.tool_config.bias == Location(latitude=48.85, longitude=2.35)


def test_grounded_query_empty_response_is_not_an_error():
    provider = FakeProvider(response={"candidates": []})
    gw, _ = _gateway(provider)
    result = asyncio.run(gw.grounded_query("anything"))
    assert result.text == ""
    assert result.sources == []


def test_provider_error_propagates_without_retry():
    provider = FakeProvider(error=NetworkError(code="NETWORK_ERROR", message="down"))
    gw, _ = _gateway(provider)
    with pytest.raises(NetworkError):
        asyncio.run(gw.chat_turn([], "hi"))
    assert len(provider.requests) == 1
    assert gw.state is GatewayState.READY


def test_aclose_releases_client_and_never_rebuilds():
    provider = FakeProvider()
    gw, calls = _gateway(provider)
    asyncio.run(gw.single_shot("x"))
    asyncio.run(gw.aclose())
    assert provider.closed is True
    assert gw.closed is True
    with pytest.raises(ConfigurationError) as exc:
        asyncio.run(gw.single_shot("y"))
    assert exc.value.code == "GATEWAY_CLOSED"
    assert calls == ["test-key"]
    assert len(provider.requests) == 1
    assert gw.state is GatewayState.READY
    # 重复关闭无副作用
    asyncio.run(gw.aclose())


def test_aclose_before_first_use_blocks_initialization():
    provider = FakeProvider()
    gw, calls = _gateway(provider)
    asyncio.run(gw.aclose())
    with pytest.raises(ConfigurationError) as exc:
        asyncio.run(gw.chat_turn([], "hi"))
    assert exc.value.code == "GATEWAY_CLOSED"
    assert calls == []
    assert provider.closed is False


def test_client_created_once_across_threads():
    provider = FakeProvider()
    calls = []
    start = threading.Barrier(8)

    def slow_factory(api_key, settings):
        calls.append(api_key)
        time.sleep(0.05)
        return provider

    gw = AIGateway(SettingsStub(), client_factory=slow_factory)
    errors = []

    def worker(i):
        start.wait()
        try:
            asyncio.run(gw.single_shot(f"q{i}"))
        except Exception as e:  # 收集后在主线程断言
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert errors == []
    assert calls == ["test-key"]
    assert len(provider.requests) == 8


def test_create_gateway_uses_given_settings():
    gw = create_gateway(MissingKeySettings())
    with pytest.raises(ConfigurationError):
        asyncio.run(gw.single_shot("x"))
