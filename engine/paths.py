import os
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parent.parent

DATA_DIR = Path(os.environ.get("MIXTAPE_DATA_DIR", PROJECT_ROOT / "data")).resolve()
LOG_DIR = Path(os.environ.get("MIXTAPE_LOG_DIR", DATA_DIR / "logs")).resolve()
PLAYLISTS_FILE = Path(os.environ.get("MIXTAPE_PLAYLISTS_FILE", DATA_DIR / "playlists.json")).resolve()
WEBUI_DIR = PROJECT_ROOT / "public"


def ensure_dir(path):
    if path:
        os.makedirs(path, exist_ok=True)
