import os
import sqlite3
import logging
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from spoonplanner.calendar_logic import format_date_for_db, parse_date_from_db
from spoonplanner.defaults import DEFAULT_ACTIVITIES
from spoonplanner.models import Activity, Profile, TimetableEntry, MIN_SPOONS, MAX_SPOONS


class Database:
    """
    SQLite store for profiles, the activity catalog and timetable entries.

    Timetable rows are keyed by (user_id, date, timeslot); the planner
    only ever saves or loads whole weeks.
    """

    def __init__(self, db_path: str = None):
        try:
            self.db_path = db_path or os.path.join(os.path.expanduser("~"), ".spoonplanner", "spoonplanner.db")
            if self.db_path != ':memory:':
                os.makedirs(os.path.dirname(os.path.abspath(self.db_path)), exist_ok=True)
            self.conn = sqlite3.connect(self.db_path)
            self.conn.row_factory = sqlite3.Row
            self._ensure_tables()
        except Exception as e:
            logging.error(f"Database connection error: {e}")
            raise

    def _ensure_tables(self):
        cur = self.conn.cursor()
        cur.execute("""
        CREATE TABLE IF NOT EXISTS profiles (
          user_id TEXT PRIMARY KEY,
          display_name TEXT NOT NULL DEFAULT '',
          daily_limit INTEGER NOT NULL,
          weekday_limit INTEGER NOT NULL,
          weekend_limit INTEGER NOT NULL,
          created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
          updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
        )""")

        cur.execute("""
        CREATE TABLE IF NOT EXISTS activities (
          id INTEGER PRIMARY KEY AUTOINCREMENT,
          user_id TEXT NOT NULL,
          name TEXT NOT NULL,
          spoons INTEGER NOT NULL,
          category TEXT NOT NULL DEFAULT '',
          description TEXT,
          is_default INTEGER NOT NULL DEFAULT 0,
          created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
          UNIQUE(user_id, name)
        )""")

        cur.execute("""
        CREATE TABLE IF NOT EXISTS timetable_entries (
          id INTEGER PRIMARY KEY AUTOINCREMENT,
          user_id TEXT NOT NULL,
          week_start TEXT NOT NULL,
          date TEXT NOT NULL,
          day_name TEXT NOT NULL,
          timeslot TEXT NOT NULL,
          activity_name TEXT NOT NULL,
          spoons INTEGER NOT NULL,
          created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
          updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
          UNIQUE(user_id, date, timeslot)
        )""")
        cur.execute(
            "CREATE INDEX IF NOT EXISTS idx_entries_week ON timetable_entries(user_id, week_start)"
        )
        self.conn.commit()

    # Profile

    def load_profile(self, user_id: str, defaults: Optional[Dict[str, int]] = None) -> Profile:
        """Return the profile of `user_id`, creating it with default limits on first use."""
        cur = self.conn.cursor()
        cur.execute(
            "SELECT user_id, display_name, daily_limit, weekday_limit, weekend_limit FROM profiles WHERE user_id=?",
            (user_id,)
        )
        row = cur.fetchone()
        if row is not None:
            return Profile(row['user_id'], row['display_name'], row['daily_limit'],
                           row['weekday_limit'], row['weekend_limit'])
        limits = defaults or {}
        profile = Profile(user_id)
        profile.daily_limit = limits.get('daily', profile.daily_limit)
        profile.weekday_limit = limits.get('weekday', profile.weekday_limit)
        profile.weekend_limit = limits.get('weekend', profile.weekend_limit)
        return self.update_profile(profile)

    def update_profile(self, profile: Profile) -> Profile:
        # weekday/weekend limits never fall below the daily limit times the day count
        if profile.daily_limit < 1:
            raise ValueError("daily_limit must be at least 1")
        profile.weekday_limit = max(profile.weekday_limit, profile.daily_limit * 5)
        profile.weekend_limit = max(profile.weekend_limit, profile.daily_limit * 2)
        cur = self.conn.cursor()
        cur.execute(
            """INSERT INTO profiles (user_id, display_name, daily_limit, weekday_limit, weekend_limit)
               VALUES (?,?,?,?,?)
               ON CONFLICT(user_id) DO UPDATE SET
                 display_name=excluded.display_name,
                 daily_limit=excluded.daily_limit,
                 weekday_limit=excluded.weekday_limit,
                 weekend_limit=excluded.weekend_limit,
                 updated_at=CURRENT_TIMESTAMP""",
            (profile.user_id, profile.display_name, profile.daily_limit,
             profile.weekday_limit, profile.weekend_limit)
        )
        self.conn.commit()
        return profile

    # Activity catalog

    def _row_to_activity(self, row) -> Activity:
        act = Activity(row['name'], row['spoons'], row['category'], row['description'], bool(row['is_default']))
        act.id = row['id']
        return act

    def load_activities(self, user_id: str, spoons: Optional[int] = None) -> List[Activity]:
        cur = self.conn.cursor()
        if spoons is None:
            cur.execute(
                "SELECT * FROM activities WHERE user_id=? ORDER BY spoons DESC, name ASC",
                (user_id,)
            )
        else:
            cur.execute(
                "SELECT * FROM activities WHERE user_id=? AND spoons=? ORDER BY name ASC",
                (user_id, spoons)
            )
        return [self._row_to_activity(row) for row in cur.fetchall()]

    def save_activity(self, user_id: str, activity: Activity) -> Optional[Activity]:
        """Insert `activity`. Returns None if the name is already taken."""
        name = (activity.name or '').strip()
        if not name:
            raise ValueError("Activity name must not be empty")
        if not MIN_SPOONS <= activity.spoons <= MAX_SPOONS:
            raise ValueError(f"spoons must be between {MIN_SPOONS} and {MAX_SPOONS}, got {activity.spoons}")
        try:
            cur = self.conn.cursor()
            cur.execute(
                "INSERT INTO activities (user_id, name, spoons, category, description, is_default) VALUES (?,?,?,?,?,?)",
                (user_id, name, activity.spoons, activity.category, activity.description, int(activity.is_default))
            )
            self.conn.commit()
        except sqlite3.Error as e:
            self.conn.rollback()
            logging.error(f"[SpoonPlanner] Failed to save activity {name!r}: {e}")
            return None
        activity.name = name
        activity.id = cur.lastrowid
        return activity

    def delete_activity(self, user_id: str, activity_id: int) -> bool:
        """Delete a user-defined activity; default activities stay."""
        try:
            cur = self.conn.cursor()
            cur.execute(
                "DELETE FROM activities WHERE id=? AND user_id=? AND is_default=0",
                (activity_id, user_id)
            )
            self.conn.commit()
        except sqlite3.Error as e:
            logging.error(f"[SpoonPlanner] Failed to delete activity {activity_id}: {e}")
            return False
        return cur.rowcount > 0

    def seed_default_activities(self, user_id: str) -> int:
        """Add every default activity the user does not have yet; returns how many were added."""
        existing = {a.name for a in self.load_activities(user_id)}
        missing = [a for a in DEFAULT_ACTIVITIES if a['name'] not in existing]
        cur = self.conn.cursor()
        cur.executemany(
            "INSERT INTO activities (user_id, name, spoons, category, description, is_default) VALUES (?,?,?,?,?,1)",
            [(user_id, a['name'], a['spoons'], a['category'], a['description']) for a in missing]
        )
        self.conn.commit()
        if missing:
            logging.info(f"[SpoonPlanner] Added {len(missing)} missing default activities")
        return len(missing)

    # Timetable

    def _row_to_entry(self, row) -> TimetableEntry:
        return TimetableEntry(
            week_start=parse_date_from_db(row['week_start']),
            date=parse_date_from_db(row['date']),
            day_name=row['day_name'],
            timeslot=row['timeslot'],
            activity_name=row['activity_name'],
            spoons=row['spoons'],
        )

    def _query_week(self, user_id: str, week_start: date):
        cur = self.conn.cursor()
        cur.execute(
            "SELECT * FROM timetable_entries WHERE user_id=? AND week_start=? ORDER BY date ASC, timeslot ASC",
            (user_id, format_date_for_db(week_start))
        )
        return cur.fetchall()

    def load_timetable_entries(self, user_id: str, week_start: date) -> List[TimetableEntry]:
        try:
            return [self._row_to_entry(row) for row in self._query_week(user_id, week_start)]
        except (sqlite3.Error, ValueError) as e:
            logging.error(f"[SpoonPlanner] Failed to load timetable entries: {e}")
            return []

    def load_previous_week_entries(self, user_id: str, week_start: date) -> List[TimetableEntry]:
        """Entries of the week before `week_start`, moved forward into this week."""
        try:
            rows = self._query_week(user_id, week_start - timedelta(days=7))
            out = []
            for row in rows:
                e = self._row_to_entry(row)
                out.append(TimetableEntry(
                    week_start=week_start,
                    date=e.date + timedelta(days=7),
                    day_name=e.day_name,
                    timeslot=e.timeslot,
                    activity_name=e.activity_name,
                    spoons=e.spoons,
                ))
            return out
        except (sqlite3.Error, ValueError) as e:
            logging.error(f"[SpoonPlanner] Failed to load previous week entries: {e}")
            return []

    def save_timetable_entries(self, user_id: str, week_start: date, entries: Iterable[TimetableEntry]):
        """
        Make the stored week equal to `entries`.

        Rows are upserted on (user, date, timeslot); with several entries for
        one key the last one wins. Stored rows of the week whose key is not
        in `entries` are deleted. Errors are logged and re-raised.
        """
        unique: Dict[tuple, TimetableEntry] = {}
        for e in entries:
            unique[(format_date_for_db(e.date), e.timeslot)] = e
        try:
            cur = self.conn.cursor()
            cur.execute(
                "SELECT id, date, timeslot FROM timetable_entries WHERE user_id=? AND week_start=?",
                (user_id, format_date_for_db(week_start))
            )
            existing = {(row['date'], row['timeslot']): row['id'] for row in cur.fetchall()}

            cur.executemany(
                """INSERT INTO timetable_entries
                     (user_id, week_start, date, day_name, timeslot, activity_name, spoons)
                   VALUES (?,?,?,?,?,?,?)
                   ON CONFLICT(user_id, date, timeslot) DO UPDATE SET
                     week_start=excluded.week_start,
                     day_name=excluded.day_name,
                     activity_name=excluded.activity_name,
                     spoons=excluded.spoons,
                     updated_at=CURRENT_TIMESTAMP""",
                [(user_id, format_date_for_db(e.week_start), key[0], e.day_name, e.timeslot,
                  e.activity_name, e.spoons) for key, e in unique.items()]
            )
            stale = [(row_id,) for key, row_id in existing.items() if key not in unique]
            cur.executemany("DELETE FROM timetable_entries WHERE id=?", stale)
            self.conn.commit()
        except sqlite3.Error as e:
            self.conn.rollback()
            logging.error(f"[SpoonPlanner] Failed to save timetable entries: {e}")
            raise
        logging.info(f"[SpoonPlanner] Saved {len(unique)} timetable entries for {format_date_for_db(week_start)}")

    def close(self):
        """Close the database connection cleanly."""
        if self.conn:
            self.conn.close()
            self.conn = None
