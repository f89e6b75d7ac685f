"""Development entry point."""

import os

from app import create_app


def _resolve_port() -> int:
    value = os.getenv("GRAPHING_SERVER_PORT") or os.getenv("PORT") or "5002"
    try:
        return int(value)
    except ValueError as exc:
        raise SystemExit(
            f"Invalid port '{value}'. Set GRAPHING_SERVER_PORT to a number."
        ) from exc


if __name__ == "__main__":
    app = create_app()
    # The plot session is process-local, so keep to one worker process.
    app.run(host=os.getenv("GRAPHING_SERVER_HOST", "127.0.0.1"), port=_resolve_port(), debug=False)
