# corvee_core/webapp/serve.py
"""Run the Corvee HTTP API."""

import uvicorn
from dotenv import load_dotenv


def main() -> None:
    load_dotenv()
    uvicorn.run(
        "corvee_core.webapp.serve:create",
        factory=True,
        host="0.0.0.0",
        port=8000,
        log_level="info",
    )


def create():
    from .app import create_app

    return create_app()


if __name__ == "__main__":
    main()
