"""
Minimal entrypoint helper for resource controller apps.
Handles host/port resolution and server startup.
"""

import os
import sys


def run_app(app):
    """
    Start a ResourceControllerApp.

    This should be called after importing your app:
        from server import app
        from resource_controller.entrypoint import run_app
        run_app(app)
    """
    try:
        port = int(os.getenv('PORT', str(app.port)))
        host = os.getenv('HOST', '0.0.0.0')

        app.logger.info(f"Starting {app.name} on {host}:{port}...")
        app.run(host=host, port=port)
    except Exception as e:
        print(f"Error starting service: {e}", file=sys.stderr)
        sys.exit(1)
