"""Entry point for the PyQt GUI client."""
import sys

from .gui.windows import ChatApplication


def main() -> None:
    app = ChatApplication()
    sys.exit(app.run())


if __name__ == "__main__":
    main()
