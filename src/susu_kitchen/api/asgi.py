"""ASGI entrypoint for the kitchen API."""

from susu_kitchen.api.app import create_app
from susu_kitchen.containers import build_container

app = create_app(build_container())
