"""Script to create the corpus schema and load the toy corpus."""

import argparse
import asyncio
import sys

sys.path.insert(0, ".")

from sqlalchemy import select

from corpusdb.auth.policy import Principal
from corpusdb.db.models import Doc, RoleName, User
from corpusdb.db.seed import seed_enumerations, seed_toy_data
from corpusdb.db.session import async_session_maker, create_schema, drop_schema, engine
from corpusdb.services.doc_service import doc_service


async def main(reset: bool):
    """Create tables and views, then seed enumerations and toy data."""
    if reset:
        print("Dropping existing schema...")
        await drop_schema(engine)

    print("Creating schema...")
    await create_schema(engine)

    async with async_session_maker() as db:
        await seed_enumerations(db)
        await seed_toy_data(db)
        await db.commit()

        users = (await db.execute(select(User).order_by(User.id))).scalars().all()
        docs = (await db.execute(select(Doc))).scalars().all()
        admin = Principal(user_id=0, role=RoleName.ADMIN, visible_user_ids=None)
        labels = await doc_service.list_labels(db, admin)

    print("\n" + "=" * 60)
    print("CORPUS DATABASE READY")
    print("=" * 60)
    for user in users:
        print(f"User {user.id}: {user.username} (X-User-Id: {user.id})")
    print(f"\nDocuments: {len(docs)}")
    for label in labels:
        print(f"  {label}")
    print("=" * 60)

    await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--reset", action="store_true", help="drop all views and tables first"
    )
    args = parser.parse_args()
    asyncio.run(main(args.reset))
