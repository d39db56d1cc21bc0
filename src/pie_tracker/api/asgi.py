"""ASGI entrypoint for the pie tracker API."""

from pie_tracker.api.app import create_app
from pie_tracker.containers import build_container

app = create_app(build_container())
