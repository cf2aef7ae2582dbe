"""Run the API with uvicorn: ``python -m fulfilment``."""

import os

import uvicorn
from dotenv import load_dotenv


def main() -> None:
    load_dotenv()
    uvicorn.run(
        "fulfilment.api:create_app",
        factory=True,
        host=os.environ.get("FULFILMENT_HOST", "0.0.0.0"),
        port=int(os.environ.get("FULFILMENT_PORT", "8080")),
        log_config=None,
    )


if __name__ == "__main__":
    main()
