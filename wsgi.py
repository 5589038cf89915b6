"""
Production WSGI entry point for Gunicorn.

Gunicorn imports this file and looks for a top-level variable named `app`.
Each worker process gets its own advice provider availability state.

Usage:
    gunicorn -w 2 -k gthread -b 0.0.0.0:$PORT wsgi:app
"""

from farmassist import create_app

app = create_app()
