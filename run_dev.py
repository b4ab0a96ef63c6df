#!/usr/bin/env python3
"""
Run the Atlas server locally under Gunicorn's eventlet worker with auto-reload.
"""

import os
import subprocess
import sys


def main():
    os.environ.setdefault('FLASK_ENV', 'development')

    from config_factory import ConfigError, load_config
    try:
        app_config = load_config()
    except ConfigError as e:
        print(f"Invalid configuration: {e}")
        sys.exit(1)

    print(f"Atlas dev server on http://{app_config.host}:{app_config.port} (Ctrl+C to stop)")

    try:
        subprocess.run(
            ['gunicorn', '--config', 'gunicorn.conf.py', '--reload', '--log-level', 'debug', 'wsgi:app'],
            check=True
        )
    except KeyboardInterrupt:
        print("\nStopped.")
    except subprocess.CalledProcessError as e:
        print(f"Gunicorn exited with status {e.returncode}")
        sys.exit(1)


if __name__ == '__main__':
    main()
