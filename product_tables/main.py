"""Entry point: delegates to the CLI app."""

from rich.traceback import install

from product_tables.cli import app
from product_tables.utils.tracing import init_tracing, shutdown_tracing


def main() -> None:
    init_tracing()
    try:
        install(show_locals=False, max_frames=5, word_wrap=True)
        app()
    finally:
        shutdown_tracing()


if __name__ == "__main__":
    main()
