#!/usr/bin/env python
"""Command line entry point: parse flags, load startup data, serve."""
import argparse
import logging
import sys

import uvicorn

from stocks_api.app import create_app
from stocks_api.catalog import CatalogError
from stocks_api.config import get_settings
from stocks_api.pages import TemplateLoadError

logger = logging.getLogger("stocks_api")


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        prog="stocks-api",
        description="Teaching stock trading API (v1 list, v2 trade, v3 flaky)",
    )
    p.add_argument("--site", help="primary host name for site")
    p.add_argument("--host", help="interface to bind")
    p.add_argument("--port", type=int, help="port to listen on")
    p.add_argument("--catalog", dest="catalog_path", help="CSV file of stock listings")
    p.add_argument("--template", dest="template_path", help="HTML page template")
    p.add_argument("--log-level", dest="log_level", help="DEBUG, INFO, WARNING, ...")
    return p.parse_args(argv)


def run(argv=None):
    args = parse_args(argv)
    settings = get_settings(**vars(args))

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        app = create_app(settings)
    except (CatalogError, TemplateLoadError) as e:
        logger.error("startup failed: %s", e)
        return 1

    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    return 0


if __name__ == "__main__":
    sys.exit(run())
