import datetime
import logging
import os
import tempfile

from PySide6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QTableWidget, QTableWidgetItem, QPushButton, QLabel, QListWidget,
    QListWidgetItem, QMessageBox, QInputDialog, QDialog, QDialogButtonBox,
    QCheckBox, QComboBox, QSpinBox, QAbstractItemView, QFormLayout, QLineEdit,
)
from PySide6.QtGui import QBrush, QColor, QPixmap
from PySide6.QtCore import Qt, QMimeData

from spoonplanner.autosave import AutoSaver
from spoonplanner.calendar_logic import (
    DAYS, TIME_SLOTS, WEEKDAY_COUNT, format_week_range, get_next_week, get_previous_week,
    get_week_days, get_week_start,
)
from spoonplanner.charts import create_energy_chart
from spoonplanner.config import load_config, save_config
from spoonplanner.data import Database
from spoonplanner.drag import DragGesture, activity_payload, drop_payload
from spoonplanner.entries import build_bulk_slots
from spoonplanner.models import ALL_OCCUPIED, SOURCE_EMPTY, MAX_SPOONS, MIN_SPOONS, Activity, Profile
from spoonplanner.session import PlannerSession
from spoonplanner.statistics import spoon_category, spoon_label
from spoonplanner.storage import JsonFileStore

# === Constants ===
WINDOW_TITLE = "SpoonPlanner"
PAYLOAD_MIME = "application/json"

PREV_BTN_TEXT = "◀ Previous"
NEXT_BTN_TEXT = "Next ▶"
UNDO_BTN_TEXT = "Undo"
REDO_BTN_TEXT = "Redo"
SAVE_BTN_TEXT = "Save"
LOAD_PREV_BTN_TEXT = "Load Previous Week"
BULK_BTN_TEXT = "Bulk Schedule"
CLEAR_BTN_TEXT = "Clear Week"
DELETE_BTN_TEXT = "Delete"
SETTINGS_BTN_TEXT = "Settings"
ACTIVITIES_BTN_TEXT = "Activities"
ADD_BTN_TEXT = "Add"

# Energy colors per spoon count
ENERGY_COLORS = {
    5: '#B00020',
    4: '#F26B38',
    3: '#FFD97D',
    2: '#A0FFA0',
    1: '#A0C4FF',
    0: '#D7C4FF',
}
COLOR_SLEEP = '#8E9AAF'


def energy_color(spoons: int, activity_name: str = None) -> str:
    if activity_name and activity_name.lower() == "sleep":
        return COLOR_SLEEP
    return ENERGY_COLORS.get(spoons, '#EEEEEE')


class ActivityPalette(QListWidget):
    """Catalog list; dragging an item carries a JSON payload {name, spoons}."""

    def __init__(self):
        super().__init__()
        self.setDragEnabled(True)
        self.setDragDropMode(QAbstractItemView.DragOnly)

    def set_activities(self, activities):
        self.clear()
        for act in activities:
            item = QListWidgetItem(f"{act.name} ({spoon_label(act.spoons)})")
            item.setData(Qt.UserRole, act)
            item.setBackground(QBrush(QColor(energy_color(act.spoons, act.name))))
            self.addItem(item)

    def mimeData(self, items):
        mime = QMimeData()
        if items:
            act = items[0].data(Qt.UserRole)
            mime.setData(PAYLOAD_MIME, activity_payload(act.name, act.spoons).encode('utf-8'))
        return mime


class WeekGrid(QTableWidget):
    """
    7 days x 12 slots. Pressing on a filled cell starts a DragGesture; moving
    with the button held hovers cells (duplicate mode fills them), releasing
    drops. Palette items can be dropped onto any cell.
    """

    def __init__(self, parent):
        super().__init__(len(TIME_SLOTS), len(DAYS))
        self.main_window = parent
        self.gesture = None
        self.setVerticalHeaderLabels(list(TIME_SLOTS))
        self.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.setAcceptDrops(True)
        self.viewport().setAcceptDrops(True)
        self.setDropIndicatorShown(True)

    def slot_at(self, row: int, col: int):
        return get_week_days(self.main_window.session.week_start)[col], TIME_SLOTS[row]

    def _slot_at_pos(self, pos):
        index = self.indexAt(pos)
        if not index.isValid():
            return None
        return self.slot_at(index.row(), index.column())

    def mousePressEvent(self, event):
        super().mousePressEvent(event)
        if event.button() != Qt.LeftButton:
            return
        slot = self._slot_at_pos(event.position().toPoint())
        if slot is not None:
            self.gesture = DragGesture.begin(
                self.main_window.session, *slot, hold_ms=self.main_window.config['duplicate_hold_ms']
            )

    def mouseMoveEvent(self, event):
        if self.gesture is None:
            super().mouseMoveEvent(event)
            return
        slot = self._slot_at_pos(event.position().toPoint())
        if slot is not None and self.gesture.hover(*slot):
            self.main_window.refresh()

    def mouseReleaseEvent(self, event):
        super().mouseReleaseEvent(event)
        gesture, self.gesture = self.gesture, None
        if gesture is None:
            return
        slot = self._slot_at_pos(event.position().toPoint())
        if slot is not None and gesture.drop(*slot):
            self.main_window.refresh()
        gesture.end()

    def dragEnterEvent(self, event):
        if event.mimeData().hasFormat(PAYLOAD_MIME):
            event.acceptProposedAction()
        else:
            event.ignore()

    def dragMoveEvent(self, event):
        if event.mimeData().hasFormat(PAYLOAD_MIME):
            event.acceptProposedAction()
        else:
            event.ignore()

    def dropEvent(self, event):
        slot = self._slot_at_pos(event.position().toPoint())
        if slot is None:
            event.ignore()
            return
        data = bytes(event.mimeData().data(PAYLOAD_MIME))
        if drop_payload(self.main_window.session, slot[0], slot[1], data):
            event.acceptProposedAction()
            self.main_window.refresh()
        else:
            event.ignore()


class BulkScheduleDialog(QDialog):
    """Pick a recharging activity, days, a start slot and a duration in slots."""

    def __init__(self, parent, activities):
        super().__init__(parent)
        self.setWindowTitle(BULK_BTN_TEXT)
        self.activities = activities
        layout = QVBoxLayout(self)

        self.activity = QComboBox()
        for act in activities:
            self.activity.addItem(act.name)
        layout.addWidget(QLabel("Activity (0 Spoons only):"))
        layout.addWidget(self.activity)

        wd_layout = QHBoxLayout()
        self.day_checks = []
        for i, day in enumerate(DAYS):
            cb = QCheckBox(day)
            wd_layout.addWidget(cb)
            self.day_checks.append((i, cb))
        layout.addLayout(wd_layout)

        hl = QHBoxLayout()
        hl.addWidget(QLabel("Start:"))
        self.start = QComboBox(); self.start.addItems(list(TIME_SLOTS))
        hl.addWidget(self.start)
        hl.addWidget(QLabel("Slots:"))
        self.duration = QSpinBox(); self.duration.setRange(1, len(TIME_SLOTS)); self.duration.setValue(1)
        hl.addWidget(self.duration)
        layout.addLayout(hl)

        buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def slot_requests(self, week_start):
        if not self.activities:
            return []
        act = self.activities[self.activity.currentIndex()]
        days = [i for i, cb in self.day_checks if cb.isChecked()]
        return build_bulk_slots(week_start, days, self.start.currentText(), self.duration.value(),
                                act.name, act.spoons)


class SettingsDialog(QDialog):
    """Display name, the three spoon limits and the duplicate hold time."""

    def __init__(self, parent, profile, hold_ms):
        super().__init__(parent)
        self.setWindowTitle(SETTINGS_BTN_TEXT)
        self.user_id = profile.user_id
        layout = QFormLayout(self)

        self.display_name = QLineEdit(profile.display_name)
        layout.addRow("Display name:", self.display_name)
        self.daily = QSpinBox(); self.daily.setRange(1, 100)
        layout.addRow("Daily limit (spoons):", self.daily)
        self.weekday = QSpinBox(); self.weekday.setMaximum(500)
        layout.addRow("Weekday limit (Mon-Fri):", self.weekday)
        self.weekend = QSpinBox(); self.weekend.setMaximum(200)
        layout.addRow("Weekend limit (Sat-Sun):", self.weekend)
        self.hold = QSpinBox(); self.hold.setRange(200, 10000); self.hold.setSingleStep(100)
        self.hold.setSuffix(" ms")
        layout.addRow("Hold to duplicate:", self.hold)

        self.daily.valueChanged.connect(self._update_minimums)
        self.daily.setValue(profile.daily_limit)
        self._update_minimums(profile.daily_limit)
        self.weekday.setValue(profile.weekday_limit)
        self.weekend.setValue(profile.weekend_limit)
        self.hold.setValue(hold_ms)

        buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        layout.addRow(buttons)

    def _update_minimums(self, daily):
        # weekday/weekend may not drop below the daily limit times the day count
        self.weekday.setMinimum(daily * WEEKDAY_COUNT)
        self.weekend.setMinimum(daily * (len(DAYS) - WEEKDAY_COUNT))

    def values(self):
        profile = Profile(
            self.user_id,
            self.display_name.text().strip(),
            self.daily.value(),
            self.weekday.value(),
            self.weekend.value(),
        )
        return profile, self.hold.value()


class ActivityDialog(QDialog):
    """Lists the catalog; adds custom activities and deletes those that are not defaults."""

    def __init__(self, parent):
        super().__init__(parent)
        self.main_window = parent
        self.setWindowTitle(ACTIVITIES_BTN_TEXT)
        layout = QVBoxLayout(self)

        self.activity_list = QListWidget()
        layout.addWidget(self.activity_list)
        self.btn_delete = QPushButton(DELETE_BTN_TEXT)
        layout.addWidget(self.btn_delete)

        form = QFormLayout()
        self.name = QLineEdit()
        form.addRow("Name:", self.name)
        self.spoons = QSpinBox(); self.spoons.setRange(MIN_SPOONS, MAX_SPOONS); self.spoons.setValue(1)
        form.addRow("Spoons:", self.spoons)
        self.category = QLabel(spoon_category(1))
        form.addRow("Category:", self.category)
        self.description = QLineEdit()
        form.addRow("Description:", self.description)
        layout.addLayout(form)
        self.btn_add = QPushButton(ADD_BTN_TEXT)
        layout.addWidget(self.btn_add)

        buttons = QDialogButtonBox(QDialogButtonBox.Close)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

        # Signals
        self.spoons.valueChanged.connect(lambda v: self.category.setText(spoon_category(v)))
        self.btn_add.clicked.connect(self.on_add)
        self.btn_delete.clicked.connect(self.on_delete)
        self.reload()

    def reload(self):
        self.activity_list.clear()
        for act in self.main_window.db.load_activities(self.main_window.user_id):
            text = f"{act.name}: {spoon_label(act.spoons)}, {spoon_category(act.spoons)}"
            if act.is_default:
                text += " (default)"
            item = QListWidgetItem(text)
            item.setData(Qt.UserRole, act)
            self.activity_list.addItem(item)

    def on_add(self):
        act = self.main_window.add_activity(self.name.text(), self.spoons.value(), self.description.text())
        if act is not None:
            self.name.clear()
            self.description.clear()
            self.reload()

    def on_delete(self):
        item = self.activity_list.currentItem()
        if item is None:
            return
        if self.main_window.delete_activity(item.data(Qt.UserRole)):
            self.reload()


class MainWindow(QMainWindow):
    def __init__(self, db=None, history_store=None, config=None, week_start=None, config_path=None):
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)
        self.resize(1100, 700)
        self.config_path = config_path
        self.config = config or load_config(config_path)
        self.db = db if db is not None else Database()
        self.history_store = history_store if history_store is not None else JsonFileStore()
        self.user_id = self.config.get('user_id', 'local')

        self.db.seed_default_activities(self.user_id)
        self.profile = self.db.load_profile(self.user_id, self.config.get('default_limits'))
        self._chart_file = os.path.join(tempfile.gettempdir(), f"spoonplanner_{os.getpid()}.png")

        self.autosaver = AutoSaver(self._save_current, self.config['autosave_delay_ms'], self)
        self.autosaver.error.connect(self.on_autosave_error)

        app = QApplication.instance()
        app.aboutToQuit.connect(self.cleanup)

        central = QWidget(); self.setCentralWidget(central)
        root = QHBoxLayout(central)

        # Sidebar: palette, totals, chart
        side = QVBoxLayout()
        side.addWidget(QLabel("Activities:"))
        self.palette = ActivityPalette()
        side.addWidget(self.palette)
        self.summary_label = QLabel()
        side.addWidget(self.summary_label)
        self.chart_label = QLabel()
        side.addWidget(self.chart_label)
        root.addLayout(side, 1)

        # Toolbar + grid
        main = QVBoxLayout()
        bar = QHBoxLayout()
        self.btn_prev = QPushButton(PREV_BTN_TEXT)
        self.week_label = QLabel()
        self.btn_next = QPushButton(NEXT_BTN_TEXT)
        self.btn_undo = QPushButton(UNDO_BTN_TEXT)
        self.btn_redo = QPushButton(REDO_BTN_TEXT)
        self.btn_save = QPushButton(SAVE_BTN_TEXT)
        self.btn_load_prev = QPushButton(LOAD_PREV_BTN_TEXT)
        self.btn_bulk = QPushButton(BULK_BTN_TEXT)
        self.btn_delete = QPushButton(DELETE_BTN_TEXT)
        self.btn_clear = QPushButton(CLEAR_BTN_TEXT)
        self.btn_activities = QPushButton(ACTIVITIES_BTN_TEXT)
        self.btn_settings = QPushButton(SETTINGS_BTN_TEXT)
        for w in (self.btn_prev, self.week_label, self.btn_next, self.btn_undo, self.btn_redo,
                  self.btn_save, self.btn_load_prev, self.btn_bulk, self.btn_delete, self.btn_clear,
                  self.btn_activities, self.btn_settings):
            bar.addWidget(w)
        main.addLayout(bar)
        self.grid = WeekGrid(self)
        main.addWidget(self.grid)
        root.addLayout(main, 4)

        # Signals
        self.btn_prev.clicked.connect(self.on_previous)
        self.btn_next.clicked.connect(self.on_next)
        self.btn_undo.clicked.connect(self.on_undo)
        self.btn_redo.clicked.connect(self.on_redo)
        self.btn_save.clicked.connect(self.on_save)
        self.btn_load_prev.clicked.connect(self.on_load_previous_week)
        self.btn_bulk.clicked.connect(self.on_bulk_schedule)
        self.btn_delete.clicked.connect(self.on_delete_selected)
        self.btn_clear.clicked.connect(self.on_clear_week)
        self.btn_activities.clicked.connect(self.on_manage_activities)
        self.btn_settings.clicked.connect(self.on_settings)
        self.grid.cellDoubleClicked.connect(self.on_slot_activated)

        self.session = None
        self.reload_activities()
        self.set_week(get_week_start(week_start or datetime.date.today()))

    def _save_current(self):
        self.session.save()

    def _flush_pending(self):
        # a pending auto-save is written now instead of being dropped
        pending = self.autosaver.is_pending()
        self.autosaver.cancel()
        if pending and self.session is not None:
            self.session.try_save()

    def set_week(self, week_start):
        self._flush_pending()
        self.session = PlannerSession(
            self.db, self.user_id, week_start, self.history_store,
            history_limit=self.config['history_limit'],
        )
        self.session.load()
        self.session.add_listener(self.autosaver.schedule)
        self.refresh()

    def refresh(self):
        session = self.session
        days = get_week_days(session.week_start)
        totals = session.daily_totals()
        self.week_label.setText(format_week_range(session.week_start))
        self.grid.setHorizontalHeaderLabels([
            f"{DAYS[i]} {d:%d.%m}\n{totals[i]}/{self.profile.daily_limit}" for i, d in enumerate(days)
        ])
        for row, t in enumerate(TIME_SLOTS):
            for col, d in enumerate(days):
                entry = session.get(d, t)
                item = QTableWidgetItem()
                if entry is not None:
                    item.setText(f"{entry.activity_name}\n{spoon_label(entry.spoons)}")
                    item.setBackground(QBrush(QColor(energy_color(entry.spoons, entry.activity_name))))
                self.grid.setItem(row, col, item)

        stats = session.summary(self.profile)
        self.summary_label.setText(
            f"Weekdays: {stats['weekday_total']}/{self.profile.weekday_limit}"
            f"{' ⚠' if stats['weekday_over'] else ''}\n"
            f"Weekend: {stats['weekend_total']}/{self.profile.weekend_limit}"
            f"{' ⚠' if stats['weekend_over'] else ''}\n"
            f"Week: {stats['week_total']}/{stats['week_limit']}"
        )
        try:
            create_energy_chart(totals, self.profile.daily_limit, self._chart_file)
            self.chart_label.setPixmap(QPixmap(self._chart_file).scaledToWidth(260))
        except Exception as e:
            logging.error(f"[SpoonPlanner] Chart error: {e}")

        self.btn_undo.setEnabled(session.history.can_undo())
        self.btn_redo.setEnabled(session.history.can_redo())

    def notify(self, text):
        self.statusBar().showMessage(text, 4000)

    def on_previous(self):
        self.set_week(get_previous_week(self.session.week_start))

    def on_next(self):
        self.set_week(get_next_week(self.session.week_start))

    def on_slot_activated(self, row, col):
        d, t = self.grid.slot_at(row, col)
        activities = self.db.load_activities(self.user_id)
        if not activities:
            return
        labels = [f"{a.name} ({spoon_label(a.spoons)})" for a in activities]
        current = self.session.get(d, t)
        idx = next((i for i, a in enumerate(activities) if current and a.name == current.activity_name), 0)
        choice, ok = QInputDialog.getItem(self, "Activity", f"{DAYS[col]} {t}", labels, idx, False)
        if not ok:
            return
        act = activities[labels.index(choice)]
        self.session.place_or_replace(d, t, act.name, act.spoons)
        self.refresh()

    def on_delete_selected(self):
        removed = 0
        for index in self.grid.selectedIndexes():
            d, t = self.grid.slot_at(index.row(), index.column())
            if self.session.remove(d, t) is not None:
                removed += 1
        if removed:
            self.refresh()

    def on_bulk_schedule(self):
        recharge = self.db.load_activities(self.user_id, spoons=0)
        dlg = BulkScheduleDialog(self, recharge)
        if dlg.exec() != QDialog.Accepted:
            return
        slots = dlg.slot_requests(self.session.week_start)
        if slots:
            self.session.bulk_place(slots)
            self.refresh()
            self.notify(f"Scheduled {len(slots)} slots.")

    def on_load_previous_week(self):
        result = self.session.load_previous_week()
        reason = result.nothing_to_merge
        if reason == SOURCE_EMPTY:
            self.notify("There are no activities from the previous week to load.")
        elif reason == ALL_OCCUPIED:
            self.notify("All time slots from the previous week are already filled.")
        else:
            self.refresh()
            self.notify(f"Loaded {result.count} activities from the previous week.")

    def on_clear_week(self):
        if self.session.clear_week():
            self.refresh()
            self.notify("All activities for this week have been removed.")

    def on_undo(self):
        if self.session.undo() is not None:
            self.refresh()
            self.notify("Reverted to previous state.")

    def on_redo(self):
        if self.session.redo() is not None:
            self.refresh()
            self.notify("Restored next state.")

    def on_save(self):
        try:
            self.autosaver.save_now()
        except Exception as e:
            logging.error(f"[SpoonPlanner] Manual save failed: {e}")
            QMessageBox.critical(self, "Save failed", "Failed to save your timetable. Please try again.")
            return
        self.notify("Your timetable has been saved.")

    def on_autosave_error(self, msg):
        self.notify(f"Auto-save failed: {msg}")

    def on_settings(self):
        dlg = SettingsDialog(self, self.profile, self.config['duplicate_hold_ms'])
        if dlg.exec() != QDialog.Accepted:
            return
        profile, hold_ms = dlg.values()
        self.apply_settings(profile, hold_ms)

    def apply_settings(self, profile, hold_ms):
        self.profile = self.db.update_profile(profile)
        self.config['duplicate_hold_ms'] = hold_ms
        try:
            save_config(self.config, self.config_path)
        except OSError as e:
            logging.error(f"[SpoonPlanner] Failed to save config: {e}")
        self.refresh()
        self.notify("Settings saved.")

    def on_manage_activities(self):
        ActivityDialog(self).exec()

    def reload_activities(self):
        self.palette.set_activities(self.db.load_activities(self.user_id))

    def add_activity(self, name, spoons, description=None):
        activity = Activity(name, spoons, spoon_category(spoons), (description or '').strip() or None)
        try:
            saved = self.db.save_activity(self.user_id, activity)
        except ValueError as e:
            QMessageBox.warning(self, "Invalid activity", str(e))
            return None
        if saved is None:
            QMessageBox.warning(self, "Invalid activity", f"An activity named {name.strip()!r} already exists.")
            return None
        self.reload_activities()
        return saved

    def delete_activity(self, activity):
        if activity.is_default:
            self.notify("Default activities cannot be deleted.")
            return False
        if not self.db.delete_activity(self.user_id, activity.id):
            return False
        self.reload_activities()
        self.notify(f"Deleted {activity.name}.")
        return True

    def cleanup(self):
        self._flush_pending()
        if os.path.exists(self._chart_file):
            os.remove(self._chart_file)
        if hasattr(self, 'db') and self.db:
            self.db.close()
            self.db = None
