"""Script de ejecución desde `src/` (`python -m main`)."""

from __future__ import annotations

import sys

# Las tablas Rich usan caracteres fuera de cp1252 en terminales Windows.
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")

from cli.main import run  # noqa: E402


if __name__ == "__main__":
    run()
