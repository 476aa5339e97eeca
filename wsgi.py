import os

# Force production config when served by a WSGI server
os.environ.setdefault("FLASK_CONFIG", "production")

from hopefoundation import create_app  # noqa: E402

app = create_app()
