import logging
import os
import click
from pathlib import Path
from flask import Flask, current_app
from flask_sqlalchemy import SQLAlchemy
from dotenv import load_dotenv

# Global DB handle
db = SQLAlchemy()


def get_engine():
    """The booking engine bound to the current app."""
    return current_app.extensions["reservex"]


def create_app(overrides=None):
    load_dotenv()

    app = Flask(__name__, instance_relative_config=True)

    # Ensure instance dir exists
    Path(app.instance_path).mkdir(parents=True, exist_ok=True)

    # Basic config
    app.config.from_mapping(
        SECRET_KEY=os.getenv("SECRET_KEY", "dev"),
        SQLALCHEMY_DATABASE_URI=(
            os.getenv("DATABASE_URL")
            or f"sqlite:///{os.path.join(app.instance_path, 'reservex.db')}"
        ),
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        REMOTE_API_URL=os.getenv("REMOTE_API_URL", ""),
        REMOTE_API_TOKEN=os.getenv("REMOTE_API_TOKEN", ""),
        REMOTE_TIMEOUT=float(os.getenv("REMOTE_TIMEOUT", "10")),
        REMOTE_HEALTH_TIMEOUT=float(os.getenv("REMOTE_HEALTH_TIMEOUT", "5")),
        OVERLAY_BACKEND=os.getenv("OVERLAY_BACKEND", "sql"),
        OVERLAY_DIR=os.getenv("OVERLAY_DIR") or os.path.join(app.instance_path, "overlay"),
        CATALOG_CACHE_TTL=float(os.getenv("CATALOG_CACHE_TTL", "300")),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
    )
    if overrides:
        app.config.update(overrides)

    logging.getLogger("reservex").setLevel(app.config["LOG_LEVEL"])

    # Init DB + blueprints
    db.init_app(app)
    from . import models  # noqa: F401  (registers overlay_collections)
    with app.app_context():
        db.create_all()

    from .engine import build_engine
    from .overlay import build_overlay_store
    from .providers.reservex_api import AuthSession, ReservexApi

    remote = ReservexApi(
        app.config["REMOTE_API_URL"],
        AuthSession(app.config["REMOTE_API_TOKEN"] or None),
        timeout=app.config["REMOTE_TIMEOUT"],
        health_timeout=app.config["REMOTE_HEALTH_TIMEOUT"],
    )
    overlay = build_overlay_store(
        app.config["OVERLAY_BACKEND"], db=db, directory=app.config["OVERLAY_DIR"],
    )
    app.extensions["reservex"] = build_engine(
        overlay, remote=remote, cache_ttl=app.config["CATALOG_CACHE_TTL"],
    )

    from .routes import bp as main_bp
    app.register_blueprint(main_bp)

    # ---------- CLI: init DB ----------
    @app.cli.command("init-db")
    def init_db_command():
        """Create all database tables."""
        with app.app_context():
            db.create_all()
        click.echo("Database initialized")

    # ---------- CLI: drop locally stored records ----------
    @app.cli.command("reset-overlay")
    @click.option("--kind", type=click.Choice(["bookings", "reviews", "favourites", "restaurants"]),
                  default=None, help="Only clear one collection")
    def reset_overlay(kind):
        """Forget records written while the remote service was unreachable."""
        get_engine().resolver.overlay.clear(kind)
        click.echo(f"Overlay cleared: {kind or 'all collections'}")

    # ---------- CLI: quick sanity count ----------
    @app.cli.command("seed-summary")
    def seed_summary():
        """Show what the bundled dataset and the local overlay hold."""
        resolver = get_engine().resolver
        for kind, n in resolver.seeds.counts().items():
            click.echo(f"seed {kind:<12} {n}")
        for kind in ("bookings", "reviews", "favourites", "restaurants"):
            click.echo(f"overlay {kind:<9} {len(resolver.overlay.load(kind))}")

    # ---------- CLI: seats left in a slot ----------
    @app.cli.command("availability")
    @click.argument("restaurant_id")
    @click.argument("date")
    @click.argument("time_slot")
    def availability(restaurant_id, date, time_slot):
        """Seats left for RESTAURANT_ID on DATE (YYYY-MM-DD) at TIME_SLOT ("7:00 PM")."""
        from .errors import ReservexError
        try:
            seats = get_engine().availability.available(restaurant_id, date, time_slot)
        except ReservexError as e:
            raise click.ClickException(e.message)
        click.echo(f"{restaurant_id} {date} {time_slot}: {seats} seats available")

    # ---------- CLI: probe the remote service ----------
    @app.cli.command("check-remote")
    def check_remote():
        """Report whether the remote booking service answers its health check."""
        engine = get_engine()
        if not engine.remote.configured:
            click.echo("REMOTE_API_URL not set; running on local data only")
            return
        ok = engine.health()
        click.echo(f"{engine.remote.base_url}: {'reachable' if ok else 'unreachable'}")

    return app
