"""
Test Suite for the Flask API
"""

import io
import os
import pytest
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'backend'))

# Rate limits would trip across tests; must be set before the app is imported
os.environ['RATELIMIT_ENABLED'] = 'false'
os.environ['REALITY_DEFENDER_ENABLED'] = 'false'

import numpy as np
from PIL import Image

import app as app_module


def png_bytes(pixels: np.ndarray) -> bytes:
    buffer = io.BytesIO()
    Image.fromarray(pixels).save(buffer, format='PNG')
    return buffer.getvalue()


@pytest.fixture
def client():
    app_module.app.config['TESTING'] = True
    with app_module.app.test_client() as client:
        yield client


def upload(client, data, filename, content_type, **form):
    form['file'] = (io.BytesIO(data), filename, content_type)
    return client.post('/api/detect-image', data=form, content_type='multipart/form-data')


class TestHealth:
    """Test health endpoints"""

    @pytest.mark.parametrize('path', ['/', '/api/health'])
    def test_health(self, client, path):
        response = client.get(path)
        data = response.get_json()

        assert response.status_code == 200
        assert data['status'] == 'ok'
        assert data['external_detection'] is False
        assert 'detect_image' in data['endpoints']


class TestDetectImage:
    """Test the detection endpoint"""

    @pytest.fixture
    def flat_png(self):
        return png_bytes(np.full((64, 64, 3), 120, dtype=np.uint8))

    def test_success(self, client, flat_png):
        response = upload(client, flat_png, 'picture.png', 'image/png')
        data = response.get_json()

        assert response.status_code == 200
        assert data['success'] is True
        assert data['method'] == 'local'
        assert data['is_ai_generated'] is True
        assert data['ai_score'] == 75
        assert data['confidence'] == 70
        assert data['details']['filename_indicator'] == 'neutral'
        assert 'features' not in data

    def test_black_image_is_not_ai(self, client):
        black_png = png_bytes(np.zeros((50, 50, 3), dtype=np.uint8))

        response = upload(client, black_png, 'picture.png', 'image/png', include_features='true')
        data = response.get_json()

        assert response.status_code == 200
        assert data['ai_score'] == 50
        assert data['is_ai_generated'] is False
        assert data['features']['frequency_analysis']['high_frequency_ratio'] is None

    def test_include_features(self, client, flat_png):
        response = upload(client, flat_png, 'picture.png', 'image/png', include_features='true')
        data = response.get_json()

        assert response.status_code == 200
        assert data['features']['dimensions'] == {'width': 64, 'height': 64}

    def test_extension_accepted_without_image_mimetype(self, client, flat_png):
        response = upload(client, flat_png, 'picture.png', 'application/octet-stream')

        assert response.status_code == 200

    def test_no_file(self, client):
        response = client.post('/api/detect-image', data={},
                               content_type='multipart/form-data')
        data = response.get_json()

        assert response.status_code == 400
        assert data['success'] is False
        assert data['error_code'] == 'NO_FILE'

    def test_non_image_rejected(self, client):
        response = upload(client, b'hello', 'notes.txt', 'text/plain')

        assert response.status_code == 400
        assert response.get_json()['error_code'] == 'INVALID_FORMAT'

    def test_undecodable_image(self, client):
        response = upload(client, b'not really a png', 'broken.png', 'image/png')

        assert response.status_code == 400
        assert response.get_json()['error_code'] == 'INVALID_IMAGE'

    def test_too_large(self, client, flat_png, monkeypatch):
        monkeypatch.setattr(app_module, 'MAX_FILE_SIZE', 10)

        response = upload(client, flat_png, 'picture.png', 'image/png')

        assert response.status_code == 400
        assert response.get_json()['error_code'] == 'FILE_TOO_LARGE'

    def test_unexpected_error(self, client, flat_png, monkeypatch):
        def boom(*args, **kwargs):
            raise MemoryError('out of memory')

        monkeypatch.setattr(app_module.image_detector, 'detect_with_fallback', boom)

        response = upload(client, flat_png, 'picture.png', 'image/png')

        assert response.status_code == 500
        assert response.get_json()['error_code'] == 'INTERNAL_ERROR'


# Run tests
if __name__ == '__main__':
    pytest.main([__file__, '-v', '--tb=short'])
