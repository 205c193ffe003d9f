"""CLI commands for StudyTrack.

Commands:
- init-db: Create the database schema
- seed: Load subjects, topics, questions and articles from YAML
- issue-token: Register a user and print a bearer token for the API
- serve: Run the Web API with uvicorn
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Any

import typer
import yaml
from rich.console import Console
from rich.table import Table

from studytrack.config.app_config import load_app_config
from studytrack.core.errors import StudyTrackError
from studytrack.db.articles_repository import create_article
from studytrack.db.database import Database
from studytrack.db.questions_repository import create_question
from studytrack.db.syllabus_repository import create_subject, create_topic
from studytrack.db.users_repository import upsert_user
from studytrack.web.auth import create_access_token

app = typer.Typer(
    name="studytrack",
    help="Study tracking for exam preparation.",
    no_args_is_help=True,
)

console = Console()


def _open_database(db_path: Path | None) -> Database:
    config = load_app_config()
    db = Database(
        db_path or config.database.path,
        timeout=config.database.busy_timeout_seconds,
    )
    db.init_schema()
    return db


@app.command(name="init-db")
def init_db(
    db_path: Path | None = typer.Option(None, "--db", help="Database file"),
) -> None:
    """Create the database schema if it does not exist."""
    db = _open_database(db_path)
    console.print(f"[green]✓ Database ready[/green] [dim]{db.path}[/dim]")


def _seed_topics(
    conn: sqlite3.Connection,
    subject_id: str,
    topics: list[dict[str, Any]],
    parent_id: str | None,
    counts: dict[str, int],
    topic_ids: dict[str, str],
) -> None:
    """Create topics recursively, with their questions."""
    for index, entry in enumerate(topics):
        topic = create_topic(
            conn,
            subject_id=subject_id,
            title=entry["title"],
            order_index=entry.get("order_index", index),
            parent_topic_id=parent_id,
            description=entry.get("description"),
            content=entry.get("content"),
            estimated_read_time=entry.get("estimated_read_time"),
            difficulty=entry.get("difficulty", "basic"),
        )
        counts["topics"] += 1
        if "key" in entry:
            topic_ids[entry["key"]] = topic.id

        for question in entry.get("questions") or []:
            create_question(
                conn,
                topic_id=topic.id,
                question=question["question"],
                options=question["options"],
                correct_option_index=question["correct_option_index"],
                explanation=question.get("explanation", ""),
                difficulty=question.get("difficulty", "basic"),
                is_from_current_affairs=question.get("is_from_current_affairs", False),
            )
            counts["questions"] += 1

        _seed_topics(conn, subject_id, entry.get("subtopics") or [], topic.id, counts, topic_ids)


@app.command()
def seed(
    file: Path = typer.Argument(..., help="YAML file with subjects and articles"),
    db_path: Path | None = typer.Option(None, "--db", help="Database file"),
) -> None:
    """Load syllabus content from a YAML file.

    The file holds a ``subjects`` list (each with nested ``topics``,
    ``subtopics`` and ``questions``) and an optional ``articles`` list.
    Articles link to topics through the topics' ``key`` values.
    """
    if not file.exists():
        console.print(f"[red]✗ File not found: {file}[/red]")
        raise typer.Exit(code=1)

    data = yaml.safe_load(file.read_text(encoding="utf-8")) or {}
    db = _open_database(db_path)

    counts = {"subjects": 0, "topics": 0, "questions": 0, "articles": 0}
    topic_ids: dict[str, str] = {}

    try:
        with db.transaction() as conn:
            for index, entry in enumerate(data.get("subjects") or []):
                subject = create_subject(
                    conn,
                    name=entry["name"],
                    icon=entry.get("icon", "book"),
                    color=entry.get("color", "blue"),
                    order_index=entry.get("order_index", index),
                    description=entry.get("description"),
                )
                counts["subjects"] += 1
                _seed_topics(conn, subject.id, entry.get("topics") or [], None, counts, topic_ids)

            for entry in data.get("articles") or []:
                create_article(
                    conn,
                    title=entry["title"],
                    content=entry["content"],
                    summary=entry["summary"],
                    published_at=str(entry["published_at"]),
                    read_time=entry.get("read_time", 5),
                    image_url=entry.get("image_url"),
                    source=entry.get("source"),
                    is_featured=entry.get("is_featured", False),
                    topic_ids=[topic_ids[key] for key in entry.get("topics") or []],
                )
                counts["articles"] += 1
    except (StudyTrackError, KeyError, TypeError, ValueError) as e:
        console.print(f"[red]✗ Seed failed, nothing was written: {e}[/red]")
        raise typer.Exit(code=1)

    table = Table(title="Seeded")
    table.add_column("Entity")
    table.add_column("Count", justify="right")
    for name, count in counts.items():
        table.add_row(name, str(count))
    console.print(table)


@app.command(name="issue-token")
def issue_token(
    user_id: str = typer.Argument(..., help="User id (created if missing)"),
    email: str | None = typer.Option(None, "--email", help="Email for a new user"),
    first_name: str | None = typer.Option(None, "--first-name"),
    last_name: str | None = typer.Option(None, "--last-name"),
    db_path: Path | None = typer.Option(None, "--db", help="Database file"),
) -> None:
    """Register a user and print a bearer token for the API."""
    config = load_app_config()
    db = _open_database(db_path)

    try:
        with db.transaction() as conn:
            user = upsert_user(
                conn,
                user_id,
                email=email,
                first_name=first_name,
                last_name=last_name,
            )
    except StudyTrackError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    token = create_access_token(user.id, config.auth)
    console.print(f"[green]✓ Token for {user.id}[/green]")
    console.print(f"  [dim]expires in:[/dim] {config.auth.token_ttl_minutes} min")
    typer.echo(token)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the Web API."""
    import uvicorn

    console.print(f"[blue]Serving StudyTrack API on http://{host}:{port}[/blue]")
    uvicorn.run("studytrack.web.api:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
