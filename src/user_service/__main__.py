import os

import uvicorn


def main() -> None:
    uvicorn.run(
        "user_service.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        log_config=None,  # setup_logging owns the handlers
    )


if __name__ == "__main__":
    main()
