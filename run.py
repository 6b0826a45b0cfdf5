#!/usr/bin/env python3
"""
Simple Flask Server Runner for the print service
"""
import os
import sys


def main():
    debug_env = os.getenv('FLASK_DEBUG', os.getenv('DEBUG', '0')).strip().lower()
    debug_enabled = debug_env in ('1', 'true', 'yes', 'on')
    host = os.getenv('HOST', '127.0.0.1')
    port = int(os.getenv('PORT', '5000'))

    from app import create_app
    app = create_app()

    print(f"Print service starting on http://{host}:{port}")
    print(f"Debug: {'ON' if debug_enabled else 'OFF'} | Presenter: {app.config.get('PRINT_PRESENTER')}")
    print("Press Ctrl+C to stop")
    print("-" * 50)

    app.run(host=host, port=port, debug=debug_enabled, use_reloader=debug_enabled)
    return 0


if __name__ == '__main__':
    sys.exit(main())
