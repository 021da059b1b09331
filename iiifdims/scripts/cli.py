"""CLI tool for iiifdims."""

from __future__ import annotations

import argparse
import asyncio
import getpass
import sys

from sqlalchemy import select

from iiifdims.actions import ServiceContainer, action_manager
from iiifdims.actions.media_attributes import (
    DIMENSION_CATEGORIES,
    MediaAttributesFromIiif,
)
from iiifdims.database import AsyncSessionLocal, init_db
from iiifdims.logging_config import configure_logging
from iiifdims.models import MEDIA_USE_VOCABULARY, Node, TaxonomyTerm, User
from iiifdims.services.iiif import open_iiif_info
from iiifdims.services.media import get_term_for_uri
from iiifdims.utils.auth import get_password_hash, get_user_by_email

DIMENSIONS_ACTION_ID = f"{MediaAttributesFromIiif.plugin_id}:{Node.entity_type}"


async def upsert_user(email: str, password: str, *, admin: bool = False) -> None:
    """Create or update a user with the given credentials."""
    await init_db()
    async with AsyncSessionLocal() as session:
        user = await get_user_by_email(session, email)
        hashed = get_password_hash(password)

        if user:
            user.hashed_password = hashed
            user.is_active = True
            user.is_admin = user.is_admin or admin
            await session.commit()
            print(f"Updated password for existing user {email}")
            return

        session.add(
            User(email=email, hashed_password=hashed, is_active=True, is_admin=admin)
        )
        await session.commit()
        print(f"Created user {email}")


async def list_users() -> None:
    await init_db()
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(User).order_by(User.id))
        for user in result.scalars():
            print(
                f"ID: {user.id}, Email: {user.email}, "
                f"Active: {user.is_active}, Admin: {user.is_admin}"
            )


async def delete_user(email: str) -> None:
    await init_db()
    async with AsyncSessionLocal() as session:
        user = await get_user_by_email(session, email)
        if not user:
            print(f"User {email} not found.", file=sys.stderr)
            return
        await session.delete(user)
        await session.commit()
        print(f"Deleted user {email}")


async def create_term(uri: str, name: str, vocabulary: str) -> None:
    """Create a taxonomy term, or rename the one already using ``uri``."""
    await init_db()
    async with AsyncSessionLocal() as session:
        term = await get_term_for_uri(session, uri)
        if term:
            term.name = name
            term.vocabulary = vocabulary
            await session.commit()
            print(f"Updated term {term.id} ({uri})")
            return

        term = TaxonomyTerm(external_uri=uri, name=name, vocabulary=vocabulary)
        session.add(term)
        await session.commit()
        print(f"Created term {term.id} ({uri})")


async def seed_media_use_terms() -> None:
    """Create the media use terms the dimension action looks for."""
    for category in DIMENSION_CATEGORIES:
        await create_term(category.term_uri, category.name, MEDIA_USE_VOCABULARY)


async def list_terms() -> None:
    await init_db()
    async with AsyncSessionLocal() as session:
        result = await session.execute(
            select(TaxonomyTerm).order_by(TaxonomyTerm.vocabulary, TaxonomyTerm.id)
        )
        for term in result.scalars():
            print(
                f"ID: {term.id}, {term.vocabulary}: {term.name} "
                f"<{term.external_uri}>"
            )


async def update_dimensions(node_id: int, email: str | None = None) -> int:
    """Run the IIIF dimension action on one node; return an exit code."""
    await init_db()
    async with AsyncSessionLocal() as session:
        node = await session.get(Node, node_id)
        if node is None:
            print(f"Node {node_id} not found.", file=sys.stderr)
            return 1

        async with open_iiif_info() as iiif_info:
            container = ServiceContainer(db=session, iiif_info=iiif_info)
            action = action_manager.create_instance(DIMENSIONS_ACTION_ID, container)

            if email is not None:
                account = await get_user_by_email(session, email)
                if not action.access(node, account):
                    print(f"{email} may not update node {node_id}.", file=sys.stderr)
                    return 1

            updated = await action.execute(node)

    if updated:
        print(f"Updated media: {', '.join(str(media_id) for media_id in updated)}")
    else:
        print("No media updated.")
    return 0


def list_actions() -> None:
    for definition in action_manager.definitions():
        print(f"{definition.id}\t{definition.label}")


def prompt_password(confirm: bool = True) -> str:
    """Prompt for a password."""
    first = getpass.getpass("Password: ")
    if not confirm:
        return first

    second = getpass.getpass("Confirm password: ")
    if first != second:
        print("Passwords do not match.", file=sys.stderr)
        sys.exit(1)
    if not first:
        print("Password cannot be empty.", file=sys.stderr)
        sys.exit(1)
    return first


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="iiifdims CLI tool.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # User management
    user_parser = subparsers.add_parser("user", help="Manage users")
    user_subparsers = user_parser.add_subparsers(dest="user_command", required=True)

    create_parser = user_subparsers.add_parser("create", help="Create or update a user")
    create_parser.add_argument("--email", required=True, help="User email")
    create_parser.add_argument("--password", help="Password (omit to prompt)")
    create_parser.add_argument(
        "--admin", action="store_true", help="Grant administrator rights"
    )

    user_subparsers.add_parser("list", help="List all users")

    delete_parser = user_subparsers.add_parser("delete", help="Delete a user")
    delete_parser.add_argument("--email", required=True, help="User email")

    # Taxonomy terms
    term_parser = subparsers.add_parser("term", help="Manage media use terms")
    term_subparsers = term_parser.add_subparsers(dest="term_command", required=True)

    term_create = term_subparsers.add_parser("create", help="Create or rename a term")
    term_create.add_argument("--uri", required=True, help="External URI")
    term_create.add_argument("--name", required=True, help="Display name")
    term_create.add_argument(
        "--vocabulary", default=MEDIA_USE_VOCABULARY, help="Vocabulary id"
    )

    term_subparsers.add_parser("list", help="List all terms")
    term_subparsers.add_parser(
        "seed", help="Create the original file and JP2 media use terms"
    )

    # Actions
    dimensions_parser = subparsers.add_parser(
        "dimensions", help="Copy IIIF image dimensions onto a node's media"
    )
    dimensions_parser.add_argument("--node", type=int, required=True, help="Node id")
    dimensions_parser.add_argument(
        "--email", help="Check update access as this user first"
    )

    subparsers.add_parser("actions", help="List available actions")

    return parser


def main() -> None:
    args = build_parser().parse_args()
    configure_logging()

    if args.command == "user":
        if args.user_command == "create":
            password = args.password or prompt_password(confirm=True)
            asyncio.run(upsert_user(args.email, password, admin=args.admin))
        elif args.user_command == "list":
            asyncio.run(list_users())
        elif args.user_command == "delete":
            asyncio.run(delete_user(args.email))

    elif args.command == "term":
        if args.term_command == "create":
            asyncio.run(create_term(args.uri, args.name, args.vocabulary))
        elif args.term_command == "list":
            asyncio.run(list_terms())
        elif args.term_command == "seed":
            asyncio.run(seed_media_use_terms())

    elif args.command == "dimensions":
        sys.exit(asyncio.run(update_dimensions(args.node, args.email)))

    elif args.command == "actions":
        list_actions()


if __name__ == "__main__":
    main()
