#!/usr/bin/env python3
"""
Threshold Chart - Main Application

Shows a stock-price or population series with an adjustable threshold line.
"""

import sys

from PyQt6.QtWidgets import QApplication
from PyQt6.QtCore import QObject

from threshold_chart.pages.chart.page import ChartPageWidget
from threshold_chart.utilities.config.api_config import api_config
from threshold_chart.utilities.logger import tc_logger


class MainApplication(QObject):
    """Main application controller"""

    def __init__(self):
        super().__init__()
        self.chart_page = None

    def start(self):
        tc_logger.ui_operation("Starting Threshold Chart", "Initializing chart page")
        keys = api_config.validate_keys()
        if not keys['alpha_vantage']:
            tc_logger.warning("ALPHA_VANTAGE_API_KEY not set, using the demo key", "CONFIG")
        self.chart_page = ChartPageWidget()
        self.chart_page.show()
        tc_logger.ui_operation("Chart page active", "Waiting for series data")

    def cleanup(self):
        """Clean up all components"""
        if self.chart_page:
            self.chart_page.cleanup()


def main():
    """Main function to run the application"""
    tc_logger.info("Threshold Chart application starting", "MAIN")

    app = QApplication(sys.argv)
    main_app = MainApplication()
    app.aboutToQuit.connect(main_app.cleanup)

    main_app.start()

    tc_logger.info("Entering PyQt6 event loop", "MAIN")
    result = app.exec()
    tc_logger.info("Application ended", "MAIN")
    return result


if __name__ == "__main__":
    sys.exit(main())
