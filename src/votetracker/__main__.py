"""Entry point for running votetracker as a module.

Allows running the application with:
    python -m votetracker

This delegates to the Typer CLI app.
"""

from votetracker.cli import app

if __name__ == "__main__":
    app()
