"""CORS configuration helper for API resources."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

ALLOWED_HEADERS = ("Authorization", "Content-Type", "X-API-KEY", "X-Request-ID")
EXPOSED_HEADERS = ("X-Request-ID",)


def init_app(app: Flask) -> None:
    """Configure CORS for API and upload endpoints.

    Parameters
    ----------
    app: flask.Flask
        Application whose ``CORS_ORIGINS`` and ``CORS_MAX_AGE`` settings are
        consulted. When ``CORS_ORIGINS`` is blank or ``"*"`` the policy allows
        any origin but disables credential support.

    Notes
    -----
    Preflight requests carry no ``X-API-KEY``; the API-key gate lets
    ``OPTIONS`` through so flask-cors can answer them.
    """
    raw_origins = app.config.get("CORS_ORIGINS", "")
    origins = [o.strip() for o in raw_origins.split(",") if o.strip()]
    wildcard = len(origins) == 0 or origins == ["*"]
    policy = {"origins": "*" if wildcard else origins}

    CORS(
        app,
        resources={r"/api/*": policy, r"/uploads/*": policy},
        allow_headers=list(ALLOWED_HEADERS),
        expose_headers=list(EXPOSED_HEADERS),
        supports_credentials=not wildcard,
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
