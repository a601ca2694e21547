"""WSGI entrypoint for the Recipe Organizer application.

Production deployments serve ``app`` through Gunicorn. Local development can
use ``flask --app main run`` which imports the ``app`` object defined below.
"""

from recipe_organizer import create_app
from recipe_organizer.logging_config import setup_logging

setup_logging()
app = create_app()


__all__ = ["app"]
