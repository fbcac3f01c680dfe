"""Database seeder: demo users (password "password") with blogs."""
import asyncio
import argparse
import random
import time
from app.database import engine, async_session, Base
from app.models import User, Blog
from app.security import hash_password

TOPICS = ["python", "fastapi", "postgresql", "redis", "docker", "testing",
          "performance", "security", "asyncio", "sqlalchemy"]

async def seed(small: bool = False):
    num_users = 3 if small else 20
    blogs_per_user = 5 if small else 50

    print(f"Seeding: {num_users} users, {num_users * blogs_per_user} blogs")
    start = time.perf_counter()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    # One hash for everyone; bcrypt is slow on purpose.
    password_hash = hash_password("password")

    async with async_session() as session:
        users = []
        for i in range(num_users):
            user = User(
                username=f"user_{i:04d}",
                name=f"User {i}",
                password_hash=password_hash,
            )
            session.add(user)
            users.append(user)
        await session.flush()
        print(f"  Created {len(users)} users")

        for user in users:
            for i in range(blogs_per_user):
                topic = random.choice(TOPICS)
                session.add(Blog(
                    title=f"Notes on {topic} #{i}",
                    url=f"https://example.com/{user.username}/{topic}-{i}",
                    author=user.name,
                    likes=random.randint(0, 500),
                    user_id=user.id,
                ))
        await session.commit()

    elapsed = time.perf_counter() - start
    print(f"\nSeeding complete in {elapsed:.1f}s")


def main():
    parser = argparse.ArgumentParser(description="Seed the blog database")
    parser.add_argument("--small", action="store_true", help="Use a small dataset")
    args = parser.parse_args()
    asyncio.run(seed(small=args.small))


if __name__ == "__main__":
    main()
