"""Entry point for the Quest ADB Tool PyQt application."""

import sys

from PyQt6.QtWidgets import QApplication

from config.config_manager import ConfigManager
from config.constants import ApplicationConstants
from ui.main_window import MainWindow
from utils import common
from utils.session_log import SessionLog

__all__ = ["MainWindow", "main"]

logger = common.get_logger('app')


def main() -> None:
    """Main application entry point."""
    app = QApplication(sys.argv)
    app.setApplicationName(ApplicationConstants.APP_NAME)
    app.setApplicationVersion(ApplicationConstants.APP_VERSION)

    config_manager = ConfigManager()
    common.set_log_level(config_manager.get_logging_settings().log_level)

    session_log = SessionLog()
    logger.info('Session log: %s', session_log.file_path or '<memory only>')

    window = MainWindow(config_manager=config_manager, session_log=session_log)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":  # pragma: no cover
    main()
