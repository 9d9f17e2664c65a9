"""Tests for the API layer: request building, response decoding, events."""
import json

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from zalopy.core.api import (
    APIConfig,
    AsyncAPIClient,
    ControlEventHandler,
    EventEmitter,
    RequestBuilder,
    ResponseHandler,
)
from zalopy.core.crypto import ParamsCipher
from zalopy.core.exceptions import CryptoError, ServerError
from zalopy.core.upload import PendingCompletionRegistry
from zalopy.core.upload.services import ChunkDispatcher


def envelope(data, code=0, message=""):
    return json.dumps({'error_code': code, 'error_message': message, 'data': data})


class TestRequestBuilder:
    """Test suite for RequestBuilder."""
    
    def test_adds_version_fields(self):
        """Test zpw_ver and zpw_type are appended."""
        url = RequestBuilder(637, 30).build_url("https://h/api/x", {'type': 2})
        
        assert url == "https://h/api/x?type=2&zpw_ver=637&zpw_type=30"
    
    def test_keeps_existing_query(self):
        """Test existing query fields are kept and not overridden."""
        url = RequestBuilder(637, 30).build_url("https://h/api/x?zpw_ver=1&a=b")
        
        assert url == "https://h/api/x?zpw_ver=1&a=b&zpw_type=30"
    
    def test_skips_none_params(self):
        """Test None values are dropped."""
        url = RequestBuilder(637, 30).build_url("https://h/x", {'a': None, 'b': 'c'})
        
        assert "a=" not in url
        assert "b=c" in url
    
    def test_headers(self):
        """Test platform headers."""
        headers = RequestBuilder(637, 30).build_headers(
            cookie="c=1", user_agent="UA", extra={'X-Test': '1'}
        )
        
        assert headers['Cookie'] == "c=1"
        assert headers['User-Agent'] == "UA"
        assert headers['Origin'] == "https://chat.zalo.me"
        assert headers['Referer'] == "https://chat.zalo.me/"
        assert headers['X-Test'] == '1'


class TestResponseHandler:
    """Test suite for ResponseHandler."""
    
    @pytest.fixture
    def cipher(self, secret_key):
        return ParamsCipher(secret_key)
    
    def test_encrypted_envelope(self, cipher):
        """Test nested envelope is decrypted."""
        inner = envelope({'fileId': 12345})
        text = envelope(cipher.encrypt(inner))
        
        assert ResponseHandler(cipher).handle(200, text) == {'fileId': 12345}
    
    def test_plain_envelope(self):
        """Test unencrypted envelope."""
        text = envelope({'ok': True})
        
        assert ResponseHandler().handle(200, text, encrypted=False) == {'ok': True}
    
    def test_outer_error(self, cipher):
        """Test outer error code."""
        text = envelope(None, code=-1, message="Invalid session")
        
        with pytest.raises(ServerError, match="Invalid session") as exc_info:
            ResponseHandler(cipher).handle(200, text)
        assert exc_info.value.code == -1
    
    def test_inner_error(self, cipher):
        """Test error code inside the decrypted envelope."""
        text = envelope(cipher.encrypt(envelope(None, code=114, message="Chunk rejected")))
        
        with pytest.raises(ServerError, match="Chunk rejected") as exc_info:
            ResponseHandler(cipher).handle(200, text)
        assert exc_info.value.code == 114
    
    def test_http_error(self, cipher):
        """Test non-2xx status."""
        with pytest.raises(ServerError, match="status code 500"):
            ResponseHandler(cipher).handle(500, "")
    
    def test_invalid_json(self, cipher):
        """Test undecodable body."""
        with pytest.raises(ServerError, match="Failed to parse"):
            ResponseHandler(cipher).handle(200, "<html>")
    
    def test_encrypted_without_cipher(self):
        """Test encrypted response needs a cipher."""
        with pytest.raises(CryptoError):
            ResponseHandler().handle(200, envelope("abc"))


class TestEventEmitter:
    """Test suite for EventEmitter."""
    
    def test_on_and_emit(self):
        """Test handler receives arguments."""
        emitter = EventEmitter()
        seen = []
        emitter.on('file_done', seen.append)
        
        assert emitter.emit('file_done', {'fileId': 1})
        assert seen == [{'fileId': 1}]
    
    def test_emit_without_handlers(self):
        """Test emit reports no handler."""
        assert EventEmitter().emit('file_done', {}) is False
    
    def test_once(self):
        """Test once handler runs a single time."""
        emitter = EventEmitter()
        seen = []
        emitter.once('file_done', seen.append)
        
        emitter.emit('file_done', 1)
        emitter.emit('file_done', 2)
        
        assert seen == [1]
        assert emitter.listener_count('file_done') == 0
    
    def test_off(self):
        """Test removing handlers."""
        emitter = EventEmitter()
        seen = []
        emitter.on('file_done', seen.append)
        emitter.off('file_done', seen.append)
        
        emitter.emit('file_done', 1)
        
        assert seen == []


class TestControlEventHandler:
    """Test suite for ControlEventHandler."""
    
    @staticmethod
    def file_done(file_id, url="https://f/x"):
        return {'content': {'act_type': 'file_done', 'fileId': file_id, 'data': {'url': url}}}
    
    @pytest.mark.asyncio
    async def test_resolves_pending_upload(self):
        """Test file_done resolves the registry entry."""
        registry = PendingCompletionRegistry()
        emitter = EventEmitter()
        events = []
        emitter.on('file_done', events.append)
        handler = ControlEventHandler(registry, emitter)
        registry.register(12345)
        
        resolved = handler.handle([self.file_done(12345)])
        
        assert resolved == 1
        assert await registry.wait(12345) == {'fileUrl': 'https://f/x', 'fileId': 12345}
        assert events == [{'fileUrl': 'https://f/x', 'fileId': 12345}]
    
    @pytest.mark.asyncio
    async def test_ignores_other_events(self):
        """Test unrelated control events are skipped."""
        registry = PendingCompletionRegistry()
        registry.register(1)
        handler = ControlEventHandler(registry)
        
        resolved = handler.handle([
            {'content': {'act_type': 'typing', 'fileId': 1}},
            {'content': {'act_type': 'file_done'}},
            {},
        ])
        
        assert resolved == 0
        assert registry.pending_ids == ["1"]
    
    @pytest.mark.asyncio
    async def test_unknown_file_id(self):
        """Test push for an unknown id is dropped."""
        handler = ControlEventHandler(PendingCompletionRegistry())
        
        assert handler.handle([self.file_done(42)]) == 0


class TestAsyncAPIClient:
    """Test suite for AsyncAPIClient."""
    
    @pytest.mark.asyncio
    async def test_post_chunk(self, context):
        """Test a chunk post against a local server."""
        cipher = ParamsCipher(context.secret_key)
        received = {}
        
        async def handler(request):
            form = await request.post()
            received['headers'] = dict(request.headers)
            received['query'] = dict(request.query)
            received['chunk'] = form['chunkContent'].file.read()
            return web.Response(
                text=envelope(cipher.encrypt(envelope({'fileId': 12345})))
            )
        
        app = web.Application()
        app.router.add_post('/api/message/asyncfile/upload', handler)
        
        async with TestServer(app) as server:
            async with AsyncAPIClient(context) as api:
                url = api.build_url(
                    str(server.make_url('/api/message/asyncfile/upload')),
                    {'type': 2, 'params': 'abc'}
                )
                data = await api.post(url, ChunkDispatcher.build_form("a.mp4", b"chunk"))
        
        assert data == {'fileId': 12345}
        assert received['chunk'] == b"chunk"
        assert received['query']['zpw_ver'] == '637'
        assert received['query']['params'] == 'abc'
        assert received['headers']['Cookie'] == context.cookie
        assert received['headers']['User-Agent'] == context.user_agent
    
    @pytest.mark.asyncio
    async def test_post_server_error(self, context):
        """Test HTTP failure surfaces as ServerError."""
        async def handler(request):
            return web.Response(status=502, text="bad gateway")
        
        app = web.Application()
        app.router.add_post('/x', handler)
        
        async with TestServer(app) as server:
            async with AsyncAPIClient(context) as api:
                with pytest.raises(ServerError, match="status code 502"):
                    await api.post(str(server.make_url('/x')))
    
    @pytest.mark.asyncio
    async def test_network_error(self, context):
        """Test connection failure surfaces as ServerError."""
        async with AsyncAPIClient(context) as api:
            with pytest.raises(ServerError, match="Network error"):
                await api.post("http://127.0.0.1:1/x")
    
    @pytest.mark.asyncio
    async def test_post_after_close(self, context):
        """Test closed client refuses requests."""
        api = AsyncAPIClient(context, APIConfig.default())
        await api.close()
        
        with pytest.raises(ServerError, match="closed"):
            await api.post("https://h/x")
