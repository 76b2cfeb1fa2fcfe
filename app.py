"""
Entry point for the micro-savings Flask application.

Run with:
    python app.py

Or with a production WSGI server:
    gunicorn -w 4 app:application
"""

from microsave import create_app
from microsave.config import Config

application = create_app()

if __name__ == "__main__":
    settings = Config()
    application.run(host=settings.HOST, port=settings.PORT, debug=False)
