"""ASGI entrypoint for the art bot API."""

from artbot.api.app import create_app
from artbot.containers import build_container

app = create_app(build_container())
