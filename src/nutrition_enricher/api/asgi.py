"""ASGI entrypoint for the nutrition enrichment API."""

from nutrition_enricher.api.app import create_app
from nutrition_enricher.containers import build_container

app = create_app(build_container())
