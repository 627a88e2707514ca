"""Simple entrypoint to print the Smart Closet dashboard for the local catalog."""

import json

from closet_app.app import SmartClosetApp


def main() -> None:
    app = SmartClosetApp()
    print(json.dumps(app.dashboard(), indent=2))


if __name__ == "__main__":
    main()
