"""
    cli.py: development setup command
"""
import click
from flask.cli import with_appcontext
from .auth import issue_token
from .config import get_config
from .db import DB
from .models import Author, Book, User

AUTHORS = ("Ursula K. Le Guin", "Terry Pratchett", "Octavia E. Butler", "Iain M. Banks", "N. K. Jemisin")


def seed_database(authors=AUTHORS, books_per_author=2):
    for author_number, name in enumerate(authors, start=1):
        author = Author(name=name)
        for book_number in range(1, books_per_author + 1):
            author.books.append(
                Book(
                    title=f"{name}: volume {book_number}",
                    description=f"Book {book_number} by {name}",
                    publication_year=str(1970 + author_number * 5 + book_number),
                )
            )
        DB.session.add(author)
    DB.session.flush()


def create_user(name, email, password="secret", role=None):
    user = User(name=name, email=email, role=role or get_config("DEFAULT_ROLE"))
    user.set_password(password)
    DB.session.add(user)
    DB.session.flush()
    return user


@click.command("dev-setup")
@with_appcontext
def dev_setup_command():
    """Recreate the database, seed it and create an admin and a regular user"""
    click.echo("Setting up development environment")
    DB.drop_all()
    DB.create_all()
    seed_database()

    admin = create_user("John Doe", "john@example.com", role=get_config("ADMIN_ROLE"))
    user = create_user("Jane Doe", "jane@example.com")
    tokens = [(admin, issue_token(admin, "dev")), (user, issue_token(user, "dev"))]
    DB.session.commit()

    for account, token in tokens:
        click.echo(f"{account.name} ({account.role}) token: {token}")
    click.echo("All done.")
