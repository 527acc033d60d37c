#!/usr/bin/env python3
"""Run the BLITZ 45 Dias web dashboard."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config.settings import WEB_HOST, WEB_PORT
from web import create_app

app = create_app()

if __name__ == "__main__":
    app.run(debug=True, host=WEB_HOST, port=WEB_PORT)
