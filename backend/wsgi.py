"""WSGI entrypoint: ``gunicorn -c gunicorn.conf.py`` or ``flask --app wsgi run``."""

from taskmanager import create_app

app = create_app()
