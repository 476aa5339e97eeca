#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
HopeFoundation launcher (local development).

- Local dev:             ./run.py --env development
- Local dev (no reload): ./run.py --env development --no-reload

Production deployments serve wsgi:app behind a WSGI server (gunicorn "wsgi:app").
"""
from __future__ import annotations

import argparse
import logging
import os
from typing import Optional

from dotenv import load_dotenv

from hopefoundation import create_app

log = logging.getLogger("hopefoundation.run")


def _normalize_env_name(v: Optional[str]) -> str:
    r = (v or "").strip().lower()
    if r in {"dev", "development", "local"}:
        return "development"
    if r in {"test", "testing"}:
        return "testing"
    if r in {"prod", "production"}:
        return "production"
    return r or "development"


def _parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Run the HopeFoundation API")
    p.add_argument("--env", default=os.getenv("FLASK_CONFIG") or os.getenv("APP_ENV") or "development")
    p.add_argument("--host", default=os.getenv("HOST", "127.0.0.1"))
    p.add_argument("--port", type=int, default=int(os.getenv("PORT", "5000")))
    p.add_argument("--no-reload", action="store_true", help="Disable the auto-reloader")
    p.add_argument("--debug", choices=("true", "false"), default=None)
    return p.parse_args(argv)


def main(argv=None) -> None:
    load_dotenv(override=False)
    args = _parse_args(argv)
    env = _normalize_env_name(args.env)

    flask_app = create_app(env)
    debug = flask_app.debug if args.debug is None else args.debug == "true"

    if env == "production" and debug:
        log.warning("debug is on in production; pass --debug=false")
    if env == "production" and flask_app.config.get("STRIPE_SECRET_KEY", "").startswith("sk_test_"):
        log.warning("production is running with Stripe test keys")

    flask_app.run(host=args.host, port=args.port, debug=debug, use_reloader=debug and not args.no_reload)


if __name__ == "__main__":
    main()
