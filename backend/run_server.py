#!/usr/bin/env python
"""
TrueFrame API launcher (no debug reloader).

Host and port come from TRUEFRAME_HOST / TRUEFRAME_PORT, defaulting to
0.0.0.0:5000.
"""
import os
import sys

from app import app, image_detector


def main():
    # Line-buffered stdout so the banner shows up under process managers
    os.environ['PYTHONUNBUFFERED'] = '1'
    if hasattr(sys.stdout, 'reconfigure'):
        sys.stdout.reconfigure(line_buffering=True)

    host = os.getenv('TRUEFRAME_HOST', '0.0.0.0')
    port = int(os.getenv('TRUEFRAME_PORT', '5000'))

    print("\n" + "=" * 70)
    print("TrueFrame Image Detection API Server")
    print("=" * 70)
    print(f"\nListening on http://{host}:{port}")
    print(f"External detection: {'on' if image_detector.external_enabled else 'off'}")
    print("  - GET  /api/health")
    print("  - POST /api/detect-image")
    print("\nPress CTRL+C to stop\n")

    app.run(
        host=host,
        port=port,
        debug=False,
        use_reloader=False,
        threaded=True
    )


if __name__ == '__main__':
    main()
