"""Entry point for running synthcache as a module."""

from .cli import app


def main() -> None:
    """Main entry point for the synthcache CLI application."""
    app()


if __name__ == "__main__":
    main()
