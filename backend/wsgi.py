# backend/wsgi.py
from sigef import create_app

app = create_app()
