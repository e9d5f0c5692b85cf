"""
TrueFrame Backend API Server
Flask application providing the AI-image detection endpoint.
"""
import logging
import os

from flask import Flask, request, jsonify
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from heuristic_detector import create_detector, ImageDecodeError
from heuristic_detector.config import MAX_FILE_SIZE, ALLOWED_EXTENSIONS

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app)  # Enable CORS for frontend requests
app.config['RATELIMIT_ENABLED'] = os.getenv('RATELIMIT_ENABLED', 'true').lower() != 'false'

# Initialize rate limiter
limiter = Limiter(
    app=app,
    key_func=get_remote_address,
    default_limits=["100 per hour"],
    storage_uri="memory://"
)

# Initialize the image detector (external API settings come from the environment)
image_detector = create_detector()


def validate_upload(file) -> dict:
    """
    Validate an uploaded file before reading it.

    Returns:
        dict with 'valid' (bool), 'error' (str or None) and 'error_code'
    """
    if file is None:
        return {'valid': False, 'error': 'No file uploaded', 'error_code': 'NO_FILE'}

    if file.filename == '':
        return {'valid': False, 'error': 'No file selected', 'error_code': 'NO_FILE'}

    ext = os.path.splitext(file.filename)[1].lower()
    content_type = (file.mimetype or '').lower()
    if not content_type.startswith('image/') and ext not in ALLOWED_EXTENSIONS:
        return {
            'valid': False,
            'error': 'Please upload a valid image file.',
            'error_code': 'INVALID_FORMAT'
        }

    return {'valid': True, 'error': None, 'error_code': None}


@app.route('/')
@app.route('/api/health')
def health_check():
    """Health check endpoint with detector status."""
    return jsonify({
        'status': 'ok',
        'service': 'TrueFrame Image Detection API',
        'version': '1.0.0',
        'external_detection': image_detector.external_enabled,
        'endpoints': {
            'detect_image': '/api/detect-image (POST)'
        }
    })


@app.route('/api/detect-image', methods=['POST'])
@limiter.limit("10 per minute")
def detect_image():
    """
    Detect whether an uploaded image is AI-generated.

    Request:
        multipart/form-data with 'file' field
        Optional: 'include_features' (true/false)

    Response:
        {
            "success": true,
            "method": "local|combined|fallback",
            "is_ai_generated": true/false,
            "ai_score": 0-100,
            "confidence": 0-100,
            "details": {...},
            "analysis_time": milliseconds
        }
    """
    try:
        file = request.files.get('file')

        validation = validate_upload(file)
        if not validation['valid']:
            return jsonify({
                'success': False,
                'error': validation['error'],
                'error_code': validation['error_code']
            }), 400

        image_data = file.read()

        if len(image_data) > MAX_FILE_SIZE:
            return jsonify({
                'success': False,
                'error': f'File size must be less than {MAX_FILE_SIZE // (1024*1024)}MB.',
                'error_code': 'FILE_TOO_LARGE'
            }), 400

        result = image_detector.detect_with_fallback(
            image_data, file.filename, file.mimetype
        )

        include_features = request.form.get('include_features', 'false').lower() == 'true'
        return jsonify({'success': True, **result.to_dict(include_features=include_features)})

    except ImageDecodeError as e:
        return jsonify({
            'success': False,
            'error': str(e),
            'error_code': 'INVALID_IMAGE'
        }), 400

    except Exception as e:
        logger.error(f"Image detection endpoint failed: {e}")
        return jsonify({
            'success': False,
            'error': f'Internal server error: {str(e)}',
            'error_code': 'INTERNAL_ERROR'
        }), 500


if __name__ == '__main__':
    print("Starting TrueFrame Image Detection API Server...")
    print("API available at: http://localhost:5000")
    print("\nEndpoints:")
    print("  GET  /                    - Health check")
    print("  POST /api/detect-image    - Analyze an uploaded image")
    print()

    app.run(debug=True, host='0.0.0.0', port=5000)
