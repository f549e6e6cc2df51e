"""Entry point for ``python -m board_service``."""

from board_service.api.cli import main

if __name__ == "__main__":
    main()
