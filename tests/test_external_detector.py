"""
Test Suite for the Reality Defender Client
HTTP calls are replaced with monkeypatched requests.post.
"""

import pytest
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'backend'))

import requests

from heuristic_detector.config import DetectionConfig
from heuristic_detector.exceptions import ExternalDetectionError
from heuristic_detector.external_detector import RealityDefenderClient


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self._payload = payload

    def json(self):
        if self._payload is None:
            raise ValueError('No JSON object could be decoded')
        return self._payload


class TestRealityDefenderClient:
    """Test request shape and response normalization"""

    @pytest.fixture
    def client(self):
        config = DetectionConfig(external_enabled=True, external_api_key='test-key',
                                 external_endpoint='https://detector.test/v1/detect',
                                 external_timeout=5)
        return RealityDefenderClient(config)

    def test_success(self, client, monkeypatch):
        calls = []

        def fake_post(url, **kwargs):
            calls.append((url, kwargs))
            return FakeResponse(payload={'score': 0.83, 'details': {'model': 'v2'}})

        monkeypatch.setattr(requests, 'post', fake_post)

        result = client.detect(b'image-bytes', 'upload.png', 'image/png')

        assert result.method == 'reality_defender'
        assert result.ai_score == pytest.approx(83)
        assert result.confidence == 83
        assert result.is_ai_generated is True
        assert result.raw_score == 0.83
        assert result.details == {'model': 'v2'}

        url, kwargs = calls[0]
        assert url == 'https://detector.test/v1/detect'
        assert kwargs['headers'] == {'Authorization': 'Bearer test-key'}
        assert kwargs['files'] == {'file': ('upload.png', b'image-bytes', 'image/png')}
        assert kwargs['timeout'] == 5

    def test_default_content_type(self, client, monkeypatch):
        calls = []

        def fake_post(url, **kwargs):
            calls.append(kwargs)
            return FakeResponse(payload={'score': 0.1})

        monkeypatch.setattr(requests, 'post', fake_post)

        result = client.detect(b'x')

        assert calls[0]['files']['file'][2] == 'application/octet-stream'
        assert result.is_ai_generated is False
        assert result.details == {}

    def test_out_of_range_score_is_bounded(self, client, monkeypatch):
        monkeypatch.setattr(requests, 'post',
                            lambda url, **kwargs: FakeResponse(payload={'score': 1.4}))

        result = client.detect(b'x', 'a.png')

        assert result.ai_score == 100
        assert result.confidence == 100
        assert result.raw_score == 1.4

    def test_non_2xx_raises(self, client, monkeypatch):
        monkeypatch.setattr(requests, 'post',
                            lambda url, **kwargs: FakeResponse(status_code=503))

        with pytest.raises(ExternalDetectionError, match='503'):
            client.detect(b'x', 'a.png')

    def test_transport_error_raises(self, client, monkeypatch):
        def fake_post(url, **kwargs):
            raise requests.exceptions.ConnectionError('connection refused')

        monkeypatch.setattr(requests, 'post', fake_post)

        with pytest.raises(ExternalDetectionError):
            client.detect(b'x', 'a.png')

    @pytest.mark.parametrize('payload', [None, {}, {'score': None}, {'score': 'high'}])
    def test_malformed_reply_raises(self, client, monkeypatch, payload):
        monkeypatch.setattr(requests, 'post',
                            lambda url, **kwargs: FakeResponse(payload=payload))

        with pytest.raises(ExternalDetectionError):
            client.detect(b'x', 'a.png')

    def test_missing_key(self, monkeypatch):
        def fake_post(url, **kwargs):
            raise AssertionError('no request expected without a key')

        monkeypatch.setattr(requests, 'post', fake_post)
        client = RealityDefenderClient(DetectionConfig(external_enabled=True))

        assert client.available is False
        with pytest.raises(ExternalDetectionError):
            client.detect(b'x', 'a.png')


class TestConfigFromEnv:
    """Test environment-driven configuration"""

    def test_defaults(self, monkeypatch):
        for name in ('REALITY_DEFENDER_ENABLED', 'REALITY_DEFENDER_API_KEY',
                     'REALITY_DEFENDER_ENDPOINT', 'REALITY_DEFENDER_TIMEOUT',
                     'DETECTOR_PARALLEL_EXTRACTION'):
            monkeypatch.delenv(name, raising=False)

        config = DetectionConfig.from_env()

        assert config.external_enabled is False
        assert config.external_api_key is None
        assert config.parallel_extraction is False

    def test_enabled(self, monkeypatch):
        monkeypatch.setenv('REALITY_DEFENDER_ENABLED', 'true')
        monkeypatch.setenv('REALITY_DEFENDER_API_KEY', 'secret')
        monkeypatch.setenv('REALITY_DEFENDER_TIMEOUT', '12.5')

        config = DetectionConfig.from_env()

        assert config.external_enabled is True
        assert config.external_api_key == 'secret'
        assert config.external_timeout == 12.5
        assert 'secret' not in repr(config)


# Run tests
if __name__ == '__main__':
    pytest.main([__file__, '-v', '--tb=short'])
