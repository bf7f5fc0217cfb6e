"""
Management commands
- init-db: create the SQL schema (and optionally load the demo catalog)
- create-admin: add an admin account
- run: serve the API with uvicorn

Usage:
  python -m storefront.manage init-db --db sqlite:///./storefront.db --seed
  python -m storefront.manage create-admin --db sqlite:///./storefront.db --username root --password s3cret! --email root@example.com
  python -m storefront.manage run --port 8000
"""
import argparse
import logging
from typing import Optional, Sequence

import uvicorn

from . import config, schemas
from .seed import seed_demo_data
from .services import sql_services

logger = logging.getLogger(__name__)


def init_db(database_url: str, seed: bool = False) -> None:
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        raise ValueError("Use a file-backed DB for init-db")

    services = sql_services(database_url)
    try:
        if seed:
            seed_demo_data(services)
    finally:
        services.close()


def create_admin(database_url: str, username: str, password: str, email: str) -> int:
    services = sql_services(database_url)
    try:
        user = services.identity.create_user(
            schemas.UserCreate(username=username, password=password, email=email), is_admin=True
        )
        return user.id
    finally:
        services.close()


def main(argv: Optional[Sequence[str]] = None):
    parser = argparse.ArgumentParser(prog="storefront")
    commands = parser.add_subparsers(dest="command", required=True)

    init = commands.add_parser("init-db", help="Create tables in a SQL database")
    init.add_argument("--db", default=config.get_state().database_url, help="SQLAlchemy database URL")
    init.add_argument("--seed", action="store_true", help="Load the demo catalog and admin user")

    admin = commands.add_parser("create-admin", help="Create an admin account")
    admin.add_argument("--db", default=config.get_state().database_url, help="SQLAlchemy database URL")
    admin.add_argument("--username", required=True)
    admin.add_argument("--password", required=True)
    admin.add_argument("--email", required=True)

    run = commands.add_parser("run", help="Serve the API")
    run.add_argument("--host", default="127.0.0.1")
    run.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)
    logging.basicConfig(level=config.get_state().log_level)

    if args.command == "init-db":
        init_db(args.db, seed=args.seed)
        logger.info("schema ready at %s", args.db)
    elif args.command == "create-admin":
        user_id = create_admin(args.db, args.username, args.password, args.email)
        logger.info("admin %s created with id %s", args.username, user_id)
    else:
        uvicorn.run("storefront.main:app", host=args.host, port=args.port)


if __name__ == "__main__":
    main()
