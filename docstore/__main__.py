"""
docstore file server
"""

import argparse
import logging
from pathlib import Path

import uvicorn
from uvicorn.config import LOGGING_CONFIG

from docstore.config import ENV_PREFIX, get_settings, validate_settings


def run(args):
    settings = get_settings()
    logging.info(f"Starting server at port {args.port}, debug={not args.nodebug}, ACL service at {settings.acl_url}")
    if warning := validate_settings():
        logging.warning(warning)
    logging.info(
        "To change server config, create an .env file and/or set environment parameters,\n"
        f"{' ' * 26}see docstore/config.py or run `python -m docstore config` to show the current settings\n"
    )

    log_config = "logging.yml" if Path("logging.yml").exists() else LOGGING_CONFIG
    uvicorn.run("docstore.api:app", host="0.0.0.0", reload=not args.nodebug, port=int(args.port), log_config=log_config)


def show_config(_args):
    settings = get_settings()
    print(f"# Settings read from environment and {settings.env_file}")
    for fieldname, fieldinfo in type(settings).model_fields.items():
        if doc := fieldinfo.description:
            print(f"# {doc}")
        print(f"{ENV_PREFIX.upper()}{fieldname.upper()}={getattr(settings, fieldname)}")
    if warning := validate_settings():
        print(f"# WARNING: {warning}")


def main():
    parser = argparse.ArgumentParser(description=__doc__, prog="python -m docstore")

    subparsers = parser.add_subparsers(dest="action", title="action", help="Action to perform:", required=True)
    p = subparsers.add_parser("run", help="Run the file server")
    p.add_argument(
        "--no-debug",
        action="store_true",
        dest="nodebug",
        help="Disable debug mode (no reloading on code changes)",
    )
    p.add_argument("-p", "--port", help="Port", default=5000)
    p.set_defaults(func=run)

    p = subparsers.add_parser("config", help="Show the current docstore settings")
    p.set_defaults(func=show_config)

    args = parser.parse_args()

    logging.basicConfig(format="[%(levelname)-7s:%(name)-15s] %(message)s", level=logging.INFO)
    httpx_logger = logging.getLogger("httpx")
    httpx_logger.setLevel(logging.WARNING)

    args.func(args)


if __name__ == "__main__":
    main()
