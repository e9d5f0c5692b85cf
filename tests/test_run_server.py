"""
Test Suite for the Server Launcher
"""

import os
import pytest
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'backend'))

os.environ['RATELIMIT_ENABLED'] = 'false'
os.environ['REALITY_DEFENDER_ENABLED'] = 'false'


class TestRunServer:
    """Test launcher import and startup"""

    def test_import_leaves_stdout_alone(self):
        stdout = sys.stdout
        sys.modules.pop('run_server', None)

        import run_server  # noqa: F401

        assert sys.stdout is stdout

    def test_main_uses_environment(self, monkeypatch, capsys):
        import run_server

        calls = []
        monkeypatch.setattr(run_server.app, 'run', lambda **kwargs: calls.append(kwargs))
        monkeypatch.setenv('TRUEFRAME_HOST', '127.0.0.1')
        monkeypatch.setenv('TRUEFRAME_PORT', '8080')

        run_server.main()

        assert calls == [{
            'host': '127.0.0.1',
            'port': 8080,
            'debug': False,
            'use_reloader': False,
            'threaded': True,
        }]
        assert 'http://127.0.0.1:8080' in capsys.readouterr().out


# Run tests
if __name__ == '__main__':
    pytest.main([__file__, '-v', '--tb=short'])
