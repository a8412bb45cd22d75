# backend/wsgi.py
from purchasing import create_app

app = create_app()
