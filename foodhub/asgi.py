"""ASGI entrypoint for the food-delivery platform backend."""
import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "foodhub.settings")

application = get_asgi_application()
