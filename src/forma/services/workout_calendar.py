"""
Monthly calendar of a gym's daily workouts.
"""

import calendar as calendar_module
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from pathlib import Path

from icalendar import Calendar
from icalendar import Event
from icalendar import vDatetime
from icalendar import vText

from forma.api.forma_api import FormaAPI
from forma.exceptions import ApiError
from forma.exceptions import ValidationError
from forma.models.workout import DailyWorkout
from forma.models.workout import ElementType
from forma.models.workout import WorkoutElement
from forma.models.workout import compose_workout_text
from forma.services.auth_service import AuthSession
from forma.services.preferences import LanguagePreference
from forma.utils.logging_utils import LoggerMixin


GRID_CELLS = 42

@dataclass
class CalendarDay:
    """One cell of the month grid."""
    day: date
    is_current_month: bool
    workout: DailyWorkout | None = None

class WorkoutCalendar(LoggerMixin):
    """Browse, edit and export one month of workouts at a time."""

    def __init__(
        self,
        api: FormaAPI,
        auth: AuthSession,
        language: LanguagePreference | None = None,
        today: date | None = None
    ):
        super().__init__()
        self.api = api
        self.auth = auth
        self.language = language or auth.language
        start = today or date.today()
        self.year = start.year
        self.month = start.month
        self.workouts: dict[date, DailyWorkout] = {}
        self.loading = False
        self.error_message: str | None = None
        self.success_message: str | None = None

    def month_grid(self) -> list[CalendarDay]:
        """Six weeks starting on the Sunday on or before the 1st."""
        first = date(self.year, self.month, 1)
        # weekday(): Monday=0 .. Sunday=6; the grid's first column is Sunday
        leading = (first.weekday() + 1) % 7
        start = first - timedelta(days=leading)
        days = []
        for offset in range(GRID_CELLS):
            day = start + timedelta(days=offset)
            days.append(CalendarDay(
                day=day,
                is_current_month=(day.year, day.month) == (self.year, self.month),
                workout=self.workouts.get(day)
            ))
        return days

    def navigate(self, delta: int) -> None:
        """Move ``delta`` months forward (negative moves back)."""
        index = self.year * 12 + (self.month - 1) + delta
        self.year, self.month = divmod(index, 12)
        self.month += 1
        self.workouts = {}

    def load(self) -> bool:
        """Fetch the current month's workouts for the signed-in gym."""
        gym = self.auth.gym
        if gym is None:
            return False
        self.loading = True
        self.error_message = None
        try:
            workouts = self.api.get_workouts(gym.id, self.year, self.month)
        except ApiError as e:
            self.workouts = {}
            self.error_message = e.message or self.language.t('error_loading_workouts')
            return False
        finally:
            self.loading = False
        self.workouts = {workout.workout_date: workout for workout in workouts}
        return True

    def workout_for(self, day: date) -> DailyWorkout | None:
        return self.workouts.get(day)

    def save(self, day: date, elements: list[WorkoutElement]) -> bool:
        """Create the day's workout, or update it when one already exists.

        Raises ``ValidationError`` when every element is empty.
        """
        gym = self.auth.require_gym()
        text = compose_workout_text(elements)
        if not text.strip():
            raise ValidationError({'workout_text': self.language.t('workout_empty')})

        self.error_message = None
        self.success_message = None
        existing = self.workout_for(day)
        try:
            if existing is not None:
                response = self.api.update_workout(existing.id, text)
                ok = bool(response.get('workout')) or response.get('success') is not False
                failure_key, success_key = 'error_updating_workout', 'workout_updated'
            else:
                response = self.api.create_workout(gym.id, day.isoformat(), text)
                ok = bool(response.get('success') or response.get('workout'))
                failure_key, success_key = 'error_creating_workout', 'workout_created'
        except ApiError as e:
            self.error_message = e.message or self.language.t('error_connecting')
            return False

        if not ok:
            self.error_message = self.language.t(failure_key)
            return False
        self.success_message = self.language.t(success_key)
        self.load()
        return True

    def delete(self, day: date) -> bool:
        existing = self.workout_for(day)
        if existing is None:
            self.error_message = self.language.t('workout_not_found')
            return False
        self.error_message = None
        try:
            self.api.delete_workout(existing.id)
        except ApiError as e:
            self.error_message = e.message or self.language.t('error_connecting')
            return False
        self.workouts.pop(day, None)
        self.success_message = self.language.t('workout_deleted')
        return True

    def build_calendar(self) -> Calendar:
        """All-day iCalendar events for the loaded month."""
        gym = self.auth.gym
        cal = Calendar()
        cal.add('prodid', vText('-//Forma//Daily Workouts//EN'))
        cal.add('version', vText('2.0'))
        cal.add('calscale', vText('GREGORIAN'))
        cal.add('method', vText('PUBLISH'))
        cal.add('x-wr-calname', vText(f"Workouts - {gym.name if gym else 'Forma'}"))

        stamp = datetime.now(UTC)
        for day in sorted(self.workouts):
            workout = self.workouts[day]
            titles = [e.content for e in workout.elements if e.type is ElementType.TITLE]
            event = Event()
            event.add('summary', titles[0] if titles else calendar_module.day_name[day.weekday()])
            event.add('dtstart', day)
            event.add('dtend', day + timedelta(days=1))
            event.add('dtstamp', vDatetime(stamp))
            event.add('uid', vText(f"{workout.id}@formacr.com"))
            event.add('description', vText(workout.workout_text))
            cal.add_component(event)
        return cal

    def export_ics(self, file_path: Path) -> int:
        """Write the loaded month to ``file_path``; returns the event count."""
        cal = self.build_calendar()
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, 'wb') as f:
            f.write(cal.to_ical())
        count = len(self.workouts)
        self.logger.info(f"Wrote {count} workouts to {file_path}")
        return count
