from __future__ import annotations

from PyQt6.QtWidgets import QApplication


PHASE_COLOR = "#e0e0e0"
DIGIT_COLOR = "#ffffff"
DELIMITER_COLOR = "#808080"
DELIMITER_DIM_COLOR = "#161616"

THEME_QSS = f"""
QWidget {{
    background: #000000;
    color: {DIGIT_COLOR};
    font-size: 13px;
}}

QLabel {{
    background: transparent;
    font-family: monospace;
}}

QLabel#PhaseLabel {{
    font-size: 45px;
    color: {PHASE_COLOR};
}}

QLabel#DigitLabel, QLabel#DelimiterLabel {{
    font-size: 90px;
}}

QPushButton {{
    border: none;
    background: #2b2b2b;
    border-radius: 6px;
    padding: 8px 14px;
    font-weight: 600;
    font-family: monospace;
}}

QPushButton:hover {{
    background: #3a3a3a;
}}

QPushButton:pressed {{
    background: #4a4a4a;
}}

QPushButton#PhaseButton {{
    background: #3c5a8a;
}}

QPushButton#PhaseButton:hover {{
    background: #4a6a9c;
}}
"""


def delimiter_qss(dimmed: bool) -> str:
    return f"color: {DELIMITER_DIM_COLOR if dimmed else DELIMITER_COLOR};"


def apply_theme(app: QApplication) -> None:
    app.setStyleSheet(THEME_QSS)
