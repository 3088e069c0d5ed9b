import os
import platform
import shutil
import subprocess
import sys
from datetime import datetime
from pathlib import Path

from PySide6.QtCore    import Qt # type: ignore
from PySide6.QtGui     import QColor, QPalette # type: ignore
from PySide6.QtWidgets import QApplication # type: ignore

from movieCollection.errors import PlayerLaunchError
from movieCollection.settings import (
    LOG_PATH, ACCENT_COLOR, COLOR_SUCCESS, COLOR_WARNING, COLOR_DANGER,
    RATING_GOOD, RATING_FAIR,
)


def log_debug(message: str) -> None:
    """Append timestamped message to the log file."""
    LOG_PATH.parent.mkdir(parents=True, exist_ok=True)
    ts = datetime.now().isoformat(timespec="seconds")
    with LOG_PATH.open("a", encoding="utf-8") as f:
        f.write(f"[{ts}] {message}\n")


def rating_color(rating: float) -> str:
    """Traffic-light colour for a 0‥10 rating."""
    if rating >= RATING_GOOD:
        return COLOR_SUCCESS
    if rating >= RATING_FAIR:
        return COLOR_WARNING
    return COLOR_DANGER


def apply_dark_palette(app: QApplication) -> None:
    """Apply a dark Fusion palette to the application."""
    palette = QPalette()
    palette.setColor(QPalette.Window,        QColor("#202124"))
    palette.setColor(QPalette.WindowText,    Qt.white)
    palette.setColor(QPalette.Base,          QColor("#2b2c2e"))
    palette.setColor(QPalette.AlternateBase, QColor("#323336"))
    palette.setColor(QPalette.Button,        QColor("#2d2e30"))
    palette.setColor(QPalette.ButtonText,    Qt.white)
    palette.setColor(QPalette.Text,          Qt.white)
    palette.setColor(QPalette.Link,          QColor(ACCENT_COLOR))
    palette.setColor(QPalette.Highlight,     QColor(ACCENT_COLOR))
    palette.setColor(QPalette.HighlightedText, Qt.white)
    app.setStyle("Fusion")
    app.setPalette(palette)


def _is_wsl() -> bool:
    return "microsoft" in platform.uname().release.lower()


def _opener_command(path: Path) -> list[str] | None:
    """Command that hands *path* to the host's default application, if any."""
    if sys.platform == "darwin":
        return ["open", str(path)] if shutil.which("open") else None
    if _is_wsl() and shutil.which("powershell.exe"):
        win_path = subprocess.run(
            ["wslpath", "-w", str(path)], capture_output=True, text=True, check=True
        ).stdout.strip()
        return ["powershell.exe", "-c", f"Start-Process '{win_path}'"]
    if shutil.which("xdg-open"):
        return ["xdg-open", str(path)]
    return None


def open_file_host(path: str | Path) -> None:
    """Open *path* with the host OS default handler (WSL-aware).

    Raises
    ------
    FileNotFoundError
        If *path* is not an existing file.
    PlayerLaunchError
        If the platform offers no default-handler facility.
    """
    file = Path(path).expanduser()
    if not file.is_file():
        raise FileNotFoundError(f"Movie file not found: {path}")
    file = file.resolve()

    if sys.platform.startswith("win"):
        os.startfile(file)      # type: ignore[attr-defined]
        return

    cmd = _opener_command(file)
    if cmd is None:
        raise PlayerLaunchError("Desktop operations not supported on this system")
    subprocess.Popen(cmd)
