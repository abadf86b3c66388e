"""
Tests for HttpResourceLoader and WavDecoder.

HTTP traffic is served by ``httpx.MockTransport``; local files come from
``tmp_path``.
"""

import io
import wave

import httpx
import pytest

from playlist_player.config.settings import LoaderSettings
from playlist_player.domain.shared.exceptions import DecodeError, FetchError, LoadFailure
from playlist_player.infrastructure.audio.http_loader import HttpResourceLoader
from playlist_player.infrastructure.audio.wav_decoder import WavDecoder

URL = "https://cdn.example.com/track.wav"


def wav_bytes(frames: int = 800, rate: int = 8000, channels: int = 1) -> bytes:
    buf = io.BytesIO()
    with wave.open(buf, "wb") as writer:
        writer.setnchannels(channels)
        writer.setsampwidth(2)
        writer.setframerate(rate)
        writer.writeframes(b"\x00\x00" * frames * channels)
    return buf.getvalue()


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestWavDecoder:
    """Tests for WavDecoder.decode."""

    def test_decode_pcm(self):
        buffer = WavDecoder().decode(wav_bytes(frames=4000, channels=2), "x.wav")

        assert buffer.sample_rate == 8000
        assert buffer.channels == 2
        assert buffer.sample_width == 2
        assert buffer.frame_count == 4000
        assert buffer.duration_seconds == pytest.approx(0.5)
        assert len(buffer.data) == 4000 * 2 * 2

    def test_empty_data(self):
        with pytest.raises(DecodeError) as exc_info:
            WavDecoder().decode(b"", "x.wav")
        assert exc_info.value.resource_ref == "x.wav"

    def test_not_a_wav(self):
        with pytest.raises(DecodeError):
            WavDecoder().decode(b"ID3\x04\x00 definitely mp3", "x.mp3")


class TestHttpFetch:
    """Tests for fetching over HTTP."""

    async def test_fetch_and_decode(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, content=wav_bytes())

        async with HttpResourceLoader(client=mock_client(handler)) as loader:
            buffer = await loader.fetch_and_decode(URL)

        assert buffer.duration_seconds == pytest.approx(0.1)
        assert str(requests[0].url) == URL

    async def test_http_error_status(self):
        client = mock_client(lambda request: httpx.Response(404))
        loader = HttpResourceLoader(client=client)

        with pytest.raises(FetchError) as exc_info:
            await loader.fetch_and_decode(URL)

        assert "404" in exc_info.value.reason
        assert isinstance(exc_info.value, LoadFailure)

    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        loader = HttpResourceLoader(client=mock_client(handler))

        with pytest.raises(FetchError) as exc_info:
            await loader.fetch_and_decode(URL)

        assert isinstance(exc_info.value.cause, httpx.ConnectError)

    async def test_body_too_large(self):
        client = mock_client(lambda request: httpx.Response(200, content=wav_bytes()))
        loader = HttpResourceLoader(settings=LoaderSettings(max_bytes=16), client=client)

        with pytest.raises(FetchError):
            await loader.fetch_and_decode(URL)

    async def test_streamed_body_without_length_stops_at_limit(self):
        """Should abort a chunked body once it passes max_bytes."""
        sent = []

        async def endless_body():
            for _ in range(1000):
                sent.append(1024)
                yield b"\x00" * 1024

        client = mock_client(lambda request: httpx.Response(200, content=endless_body()))
        loader = HttpResourceLoader(settings=LoaderSettings(max_bytes=4096), client=client)

        with pytest.raises(FetchError) as exc_info:
            await loader.fetch_and_decode(URL)

        assert "4096 bytes" in exc_info.value.reason
        assert len(sent) < 10

    async def test_streamed_body_within_limit(self):
        payload = wav_bytes()

        async def chunked_body():
            for start in range(0, len(payload), 100):
                yield payload[start : start + 100]

        client = mock_client(lambda request: httpx.Response(200, content=chunked_body()))
        loader = HttpResourceLoader(client=client)

        buffer = await loader.fetch_and_decode(URL)

        assert buffer.frame_count == 800

    async def test_declared_length_over_limit_rejected_before_reading(self):
        def handler(request):
            return httpx.Response(
                200, headers={"Content-Length": "1000000"}, content=b"\x00" * 16
            )

        loader = HttpResourceLoader(
            settings=LoaderSettings(max_bytes=1024), client=mock_client(handler)
        )

        with pytest.raises(FetchError):
            await loader.fetch_and_decode(URL)

    async def test_undecodable_body(self):
        client = mock_client(lambda request: httpx.Response(200, content=b"<html></html>"))
        loader = HttpResourceLoader(client=client)

        with pytest.raises(DecodeError):
            await loader.fetch_and_decode(URL)

    async def test_borrowed_client_left_open(self):
        client = mock_client(lambda request: httpx.Response(200, content=wav_bytes()))

        async with HttpResourceLoader(client=client):
            pass

        assert not client.is_closed
        await client.aclose()

    async def test_owned_client_uses_settings(self):
        settings = LoaderSettings(timeout_seconds=5.0, user_agent="tester/2.0")
        loader = HttpResourceLoader(settings=settings)

        client = loader._get_client()

        assert client.headers["User-Agent"] == "tester/2.0"
        assert client.timeout.read == 5.0
        await loader.aclose()
        assert client.is_closed


class TestFileFetch:
    """Tests for local files."""

    async def test_plain_path(self, tmp_path):
        path = tmp_path / "a.wav"
        path.write_bytes(wav_bytes(frames=1600))

        buffer = await HttpResourceLoader().fetch_and_decode(str(path))

        assert buffer.duration_seconds == pytest.approx(0.2)

    async def test_file_url(self, tmp_path):
        path = tmp_path / "b c.wav"
        path.write_bytes(wav_bytes())

        buffer = await HttpResourceLoader().fetch_and_decode(path.as_uri())

        assert buffer.frame_count == 800

    async def test_missing_file(self, tmp_path):
        with pytest.raises(FetchError) as exc_info:
            await HttpResourceLoader().fetch_and_decode(str(tmp_path / "missing.wav"))

        assert "File not found" in exc_info.value.reason

    async def test_file_too_large(self, tmp_path):
        path = tmp_path / "a.wav"
        path.write_bytes(wav_bytes())
        loader = HttpResourceLoader(settings=LoaderSettings(max_bytes=10))

        with pytest.raises(FetchError) as exc_info:
            await loader.fetch_and_decode(str(path))

        assert "10 bytes" in exc_info.value.reason
