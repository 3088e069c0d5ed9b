import sys

from PySide6.QtWidgets import QApplication, QMessageBox # type: ignore

from movieCollection.errors   import ConfigError, DatabaseConnectionError
from movieCollection.settings import load_db_settings
from movieCollection.utils    import apply_dark_palette, log_debug
from movieCollection.gui      import MainWindow, start_services, cleanup_warning
from movieCollection.gui.window_center import center_when_shown


def _fatal(title: str, message: str) -> int:
    """Show a blocking error box and return the process exit code."""
    log_debug(f"{title}: {message}")
    QMessageBox.critical(None, title, message)
    return 1


def _show_cleanup_reminder(window: MainWindow, text: str) -> None:
    box = QMessageBox(window)
    box.setIcon(QMessageBox.Warning)
    box.setWindowTitle("Movie Cleanup Reminder")
    box.setText("Some movies may need to be removed")
    box.setInformativeText(text)
    box.setMinimumHeight(300)
    box.exec()


# ────────────────────────────────────────────────────────────────────────────
# Application entry
# ────────────────────────────────────────────────────────────────────────────
def main() -> int:
    app = QApplication(sys.argv)
    app.setApplicationName("Private Movie Collection")
    apply_dark_palette(app)

    # -------- settings + database bootstrap ---------------------------
    try:
        settings = load_db_settings()
        services, status = start_services(settings)
    except ConfigError as e:
        return _fatal("Configuration Error", str(e))
    except DatabaseConnectionError as e:
        return _fatal("Database Error", f"Failed to initialize application:\n\n{e}")

    # -------- main window ---------------------------------------------
    window = MainWindow(services, status)
    center_when_shown(window)
    window.show()

    # -------- start-up cleanup reminder -------------------------------
    if text := cleanup_warning(services):
        _show_cleanup_reminder(window, text)

    # -------- run the event-loop -------------------------------------
    return app.exec()


# Python entry-point guard
if __name__ == "__main__":
    sys.exit(main())
