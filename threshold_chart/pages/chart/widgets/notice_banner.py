"""Transient notice banner shown at the bottom of the chart page"""

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtWidgets import QLabel


class NoticeBanner(QLabel):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("noticeBanner")
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.setWordWrap(True)
        self.hide()

        self.hide_timer = QTimer(self)
        self.hide_timer.setSingleShot(True)
        self.hide_timer.timeout.connect(self.dismiss)

    def show_notice(self, message: str, duration_ms: int):
        self.setText(message)
        self.show()
        self.hide_timer.start(max(0, int(duration_ms)))

    def dismiss(self):
        self.hide_timer.stop()
        self.clear()
        self.hide()
