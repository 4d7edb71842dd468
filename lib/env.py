from __future__ import annotations

from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Repo-root .env first, then the ".env/.env" directory layout.
ENV_CANDIDATES: tuple[Path, ...] = (Path(".env"), Path(".env") / ".env")


def load_env() -> Optional[Path]:
    """
    Load the first .env file found into the process environment.

    Existing variables win over file values. Returns the file that was
    loaded, or None when there is none.
    """
    for candidate in ENV_CANDIDATES:
        if candidate.is_file():
            load_dotenv(dotenv_path=candidate, override=False)
            return candidate
    return None
