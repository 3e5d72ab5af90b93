# src/spoonplanner/main.py

import logging
import sys

from PySide6.QtWidgets import QApplication

from spoonplanner.ui import MainWindow


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    app = QApplication(sys.argv)
    win = MainWindow()
    win.show()
    sys.exit(app.exec())


if __name__ == '__main__':
    main()
