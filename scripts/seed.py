"""CLI for seeding users, courses and enrollments.

Usage::

    uv run python -m scripts.seed <command> [options]

Commands:
    create-user     Create a user with a hashed password
    create-course   Create a course
    enroll          Enroll a user (by email) in a course (by title)
    list-courses    List courses with enrollment counts
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable

from email_validator import EmailNotValidError, validate_email
from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import Session

from course_catalog.auth.passwords import hash_password
from course_catalog.config import settings
from course_catalog.storage.orm import Course, Enrollment, User, UserRole

MIN_TITLE_LENGTH = 5


def get_sync_session() -> Session:
    """Create sync session for CLI operations.

    Uses the same database URL as the async app (psycopg v3
    handles both sync and async natively).
    """
    engine = create_engine(settings.database_url)
    return Session(engine)


def normalize_email(raw: str) -> str:
    """Normalize an email the way the login endpoint does.

    Stored and submitted addresses must compare equal, and login accepts
    ``EmailStr``, which lowercases the domain.
    """
    try:
        return validate_email(raw, check_deliverability=False).normalized
    except EmailNotValidError as exc:
        print(f"Invalid email {raw!r}: {exc}", file=sys.stderr)
        sys.exit(1)


def create_user(args: argparse.Namespace) -> None:
    """Create a user; the password is stored hashed."""
    email = normalize_email(args.email)
    with get_sync_session() as session:
        existing = session.execute(
            select(User).where(User.email == email)
        ).scalar_one_or_none()
        if existing is not None:
            print(f"User already exists: {email}", file=sys.stderr)
            sys.exit(1)

        user = User(
            email=email,
            name=args.name,
            password=hash_password(args.password),
            role=UserRole(args.role),
        )
        session.add(user)
        session.commit()
        print(f"User created: {email} ({user.role}, id: {user.id})")


def create_course(args: argparse.Namespace) -> None:
    """Create a course."""
    if len(args.title) < MIN_TITLE_LENGTH:
        print(
            f"Title must be at least {MIN_TITLE_LENGTH} characters long",
            file=sys.stderr,
        )
        sys.exit(1)

    with get_sync_session() as session:
        existing = session.execute(
            select(Course).where(Course.title == args.title)
        ).scalar_one_or_none()
        if existing is not None:
            print(f"Course already exists: {args.title}", file=sys.stderr)
            sys.exit(1)

        course = Course(title=args.title, description=args.description)
        session.add(course)
        session.commit()
        print(f"Course created: {args.title} (id: {course.id})")


def enroll(args: argparse.Namespace) -> None:
    """Enroll an existing user in an existing course."""
    email = normalize_email(args.email)
    with get_sync_session() as session:
        user = session.execute(
            select(User).where(User.email == email)
        ).scalar_one_or_none()
        if user is None:
            print(f"User not found: {email}", file=sys.stderr)
            sys.exit(1)

        course = session.execute(
            select(Course).where(Course.title == args.course)
        ).scalar_one_or_none()
        if course is None:
            print(f"Course not found: {args.course}", file=sys.stderr)
            sys.exit(1)

        session.add(Enrollment(user_id=user.id, course_id=course.id))
        session.commit()
        print(f'Enrolled {email} in "{args.course}"')


def list_courses(_args: argparse.Namespace) -> None:
    """List all courses with enrollment counts."""
    with get_sync_session() as session:
        stmt = (
            select(
                Course.title,
                func.count(Enrollment.id).label("enrollments"),
            )
            .outerjoin(Enrollment, Course.id == Enrollment.course_id)
            .group_by(Course.id)
            .order_by(Course.title)
        )
        rows = session.execute(stmt).all()

        if not rows:
            print("No courses found.")
            return

        print("Courses:")
        for i, row in enumerate(rows, 1):
            n = row.enrollments
            print(f"  {i}. {row.title} ({n} enrollment{'s' if n != 1 else ''})")


def main() -> None:
    """Parse arguments and dispatch to command handler."""
    parser = argparse.ArgumentParser(description="Course catalog seeding CLI")
    sub = parser.add_subparsers(dest="command", required=True)

    # create-user
    p = sub.add_parser("create-user", help="Create a user")
    p.add_argument("--email", required=True, help="Unique email")
    p.add_argument("--name", required=True, help="Display name")
    p.add_argument("--password", required=True, help="Plaintext password")
    p.add_argument(
        "--role",
        choices=[r.value for r in UserRole],
        default=UserRole.STUDENT.value,
        help="User role",
    )

    # create-course
    p = sub.add_parser("create-course", help="Create a course")
    p.add_argument("--title", required=True, help="Unique title (min 5 chars)")
    p.add_argument("--description", default=None, help="Optional description")

    # enroll
    p = sub.add_parser("enroll", help="Enroll a user in a course")
    p.add_argument("--email", required=True, help="User email")
    p.add_argument("--course", required=True, help="Course title")

    # list-courses
    sub.add_parser("list-courses", help="List courses with enrollment counts")

    args = parser.parse_args()
    commands: dict[str, Callable[[argparse.Namespace], None]] = {
        "create-user": create_user,
        "create-course": create_course,
        "enroll": enroll,
        "list-courses": list_courses,
    }
    commands[args.command](args)


if __name__ == "__main__":
    main()
