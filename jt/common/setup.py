import os
import sys
from pathlib import Path
from dataclasses import dataclass

# Lil helper function to create missing directories if missing, and optionally error out when a path
# doesn't exist.
def ensure_directory(path: Path,must_exist=False):
    if must_exist:
        if not path.exists():
            raise FileNotFoundError(f"Required directory is missing: {path}")
        if not path.is_dir():
            raise NotADirectoryError(f"Expected a directory, got a file: {path}")
    else:
        path.mkdir(parents=True,exist_ok=True)
    return path

# Picks the per-user folder that journal timer data lives under. JT_DATA_DIR always wins so tests and portable
# installs can redirect everything.
def _resolve_data_root():
    override = os.getenv("JT_DATA_DIR")
    if override:
        return Path(override)
    if sys.platform == "win32":
        appdata = os.getenv("APPDATA")
        if not appdata:
            raise RuntimeError("Missing APPDATA environment variable, cannot determine data directories.")
        return Path(appdata) / "JournalTimer"
    xdg = os.getenv("XDG_DATA_HOME")
    base = Path(xdg) if xdg else Path.home() / ".local" / "share"
    return base / "JournalTimer"

# Dataclass for accessing paths across program.
@dataclass(frozen=False)
class ProjectPaths:

    root: Path
    data: Path
    assets: Path

    logs: Path
    current: Path

    @staticmethod
    def build():
        # Package folder itself, assets ship inside it
        root = Path(__file__).resolve().parents[1]
        assets = root / "assets"

        # Folder for all user-specific and session related stuff
        data = ensure_directory(_resolve_data_root())

        # Folders within the data folder
        logs = ensure_directory(data / "logs")
        current = ensure_directory(data / "current")

        return ProjectPaths(
            root = root,
            data = data,
            assets = assets,
            logs = logs,
            current = current,
        )
PATHS = ProjectPaths.build()
