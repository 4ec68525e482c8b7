from __future__ import annotations

import logging
from dataclasses import asdict, fields, replace
from typing import Mapping, Optional

from flask import Flask, jsonify, request

from .config import SETTINGS, configure_logging
from .errors import ConfigurationError, SourceError
from .infrastructure.cache import CACHE
from .infrastructure.imaging import decode_image, encode_png
from .infrastructure.network import FETCHER
from .infrastructure.responses import send_png_bytes
from .processing.buffer import PixelBuffer
from .processing.catalog import CATALOG
from .processing.params import StyleParameters
from .processing.pipeline import PipelineRunner

APP_VERSION = "1.0.0"

logger = logging.getLogger(__name__)


def parse_seed(args: Mapping[str, str]) -> Optional[int]:
    raw = args.get("seed")
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"seed must be an integer, got {raw!r}") from None


def render(buffer: PixelBuffer, args: Mapping[str, str]) -> bytes:
    params = StyleParameters.from_mapping(args)
    runner = PipelineRunner(
        args.get("style"),
        params,
        seed=parse_seed(args),
        on_step=lambda index, name: logger.info("Step %d: %s", index, name),
    )
    return encode_png(runner.run(buffer))


def _uploaded_bytes() -> bytes:
    upload = request.files.get("image")
    if upload is not None:
        return upload.read()
    return request.get_data()


def create_app() -> Flask:
    configure_logging()
    app = Flask(__name__)

    @app.errorhandler(ConfigurationError)
    def configuration_error(exc: ConfigurationError):
        return jsonify(error=str(exc)), 400

    @app.errorhandler(SourceError)
    def source_error(exc: SourceError):
        return jsonify(error=str(exc)), 502

    @app.route("/stylize", methods=["POST"])
    def stylize_upload():
        args = {**request.form.to_dict(), **request.args.to_dict()}
        buffer = decode_image(_uploaded_bytes())
        return send_png_bytes(render(buffer, args))

    @app.route("/stylize", methods=["GET"])
    def stylize_remote():
        args = request.args.to_dict()
        source_url = args.get("source_url")
        if not source_url:
            raise ConfigurationError("source_url is required")

        # Unseeded renders are random, so only seeded ones are worth caching.
        cacheable = parse_seed(args) is not None
        cache_key = request.full_path
        if cacheable:
            cached = CACHE.get(cache_key)
            if cached:
                return send_png_bytes(cached)

        data = render(FETCHER.fetch_source(source_url), args)
        if cacheable:
            CACHE.put(cache_key, data)
        return send_png_bytes(data)

    @app.route("/styles")
    def styles():
        return jsonify(styles=CATALOG.describe(), limits=StyleParameters.LIMITS)

    @app.route("/health")
    def health():
        return jsonify(
            ok=True,
            version=APP_VERSION,
            default_style=SETTINGS.default_style,
            styles=len(CATALOG.keys()),
        )

    @app.route("/settings", methods=["GET", "PATCH"])
    def settings_view():
        if request.method == "GET":
            return jsonify(asdict(SETTINGS))

        payload = request.get_json(silent=True) or {}
        errors: dict[str, str] = {}
        applied: dict[str, object] = {}

        for field in fields(SETTINGS):
            if field.name not in payload:
                continue

            raw_value = payload[field.name]
            current = getattr(SETTINGS, field.name)
            try:
                if isinstance(current, bool):
                    coerced = str(raw_value).lower() in {"1", "true", "yes", "on"}
                elif isinstance(current, int):
                    coerced = int(raw_value)
                elif isinstance(current, float):
                    coerced = float(raw_value)
                else:
                    coerced = str(raw_value)
            except (TypeError, ValueError):
                errors[field.name] = f"Expected {type(current).__name__}"
                continue

            if field.name == "default_style":
                coerced = str(coerced).lower()
                if coerced not in CATALOG:
                    errors[field.name] = f"Unknown style '{coerced}'"
                    continue

            try:
                replace(SETTINGS, **{field.name: coerced}).validate()
            except ConfigurationError as exc:
                errors[field.name] = str(exc)
                continue

            setattr(SETTINGS, field.name, coerced)
            applied[field.name] = coerced

        status = 400 if errors else 200
        return (
            jsonify(updated=applied, errors=errors, settings=asdict(SETTINGS)),
            status,
        )

    return app


# Module-level application for WSGI servers (``stitchify.app:app``).
app = create_app()
application = app
