#setup: python -m venv .venv
#setup: source .venv/bin/activate   # (windows: .venv\Scripts\activate)
#setup: pip install -e ".[test]"
#setup: python -m backend.main [settings.json]

from __future__ import annotations

import sys

from backend.app import create_app
from backend.settings import AppSettings, load_settings


def main(argv: list[str] | None = None) -> None:
    argv = sys.argv[1:] if argv is None else argv
    settings = load_settings(argv[0]) if argv else AppSettings()
    app = create_app(settings)
    app.run(port=5000, debug=True)


if __name__ == "__main__":
    main()
