"""Create/edit member forms and the gym sign-up form."""

import re
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from forma.api.forma_api import FormaAPI
from forma.exceptions import ApiError
from forma.exceptions import ValidationError
from forma.models.membership import DEFAULT_MONTHLY_FEE
from forma.models.membership import MembershipRecord
from forma.models.parsing import amount_to_json
from forma.models.parsing import format_date
from forma.services.auth_service import AuthSession
from forma.services.preferences import LanguagePreference
from forma.utils.logging_utils import LoggerMixin


EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
PHONE_PATTERN = re.compile(r'^\+?[0-9\s-]{8,}$')
MIN_AGE = 16
GENDERS = ('male', 'female', 'unspecified')

@dataclass
class UserFormData:
    """Values of the member form."""
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    date_of_birth: date | None = None
    gender: str = "unspecified"
    monthly_fee: Decimal = DEFAULT_MONTHLY_FEE
    start_date: date | None = field(default_factory=date.today)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

def validate_user(
    data: UserFormData,
    language: LanguagePreference,
    creating: bool = True,
    today: date | None = None
) -> dict[str, str]:
    """Return field -> message for every rule ``data`` breaks."""
    today = today or date.today()
    errors: dict[str, str] = {}

    if not data.first_name.strip():
        errors['first_name'] = language.t('first_name_required')
    if not data.last_name.strip():
        errors['last_name'] = language.t('last_name_required')

    if not data.email.strip():
        errors['email'] = language.t('email_required')
    elif not EMAIL_PATTERN.match(data.email):
        errors['email'] = language.t('email_invalid')

    if data.phone and not PHONE_PATTERN.match(data.phone):
        errors['phone'] = language.t('phone_invalid')

    # Age is the plain difference of calendar years
    if data.date_of_birth and today.year - data.date_of_birth.year < MIN_AGE:
        errors['date_of_birth'] = language.t('min_age')

    if data.gender not in GENDERS:
        errors['gender'] = f"{data.gender!r} is not one of {', '.join(GENDERS)}"

    if not data.monthly_fee or data.monthly_fee <= 0:
        errors['monthly_fee'] = language.t('monthly_fee_positive')

    if creating:
        if data.start_date is None:
            errors['start_date'] = language.t('start_date_required')
        elif data.start_date < today:
            errors['start_date'] = language.t('start_date_past')

    return errors

class UserForm(LoggerMixin):
    """Creates members (with their first membership) and edits member profiles."""

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
        self.today = today
        self.error_message: str | None = None
        self.success_message: str | None = None

    def default_fee(self) -> Decimal:
        """The gym's monthly fee, or 25000 when the gym has none."""
        gym = self.auth.gym
        if gym is not None and gym.monthly_fee:
            return gym.monthly_fee
        return DEFAULT_MONTHLY_FEE

    def new_data(self, **values: Any) -> UserFormData:
        """Blank form prefilled with the gym's fee and today's start date."""
        data = UserFormData(
            monthly_fee=self.default_fee(),
            start_date=self.today or date.today()
        )
        for name, value in values.items():
            if value is not None:
                setattr(data, name, value)
        return data

    @staticmethod
    def from_membership(record: MembershipRecord) -> UserFormData:
        user = record.user
        return UserFormData(
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            phone=user.phone or "",
            date_of_birth=user.date_of_birth,
            gender=user.gender,
            monthly_fee=record.monthly_fee,
            start_date=record.start_date,
        )

    def validate(self, data: UserFormData, creating: bool = True) -> None:
        errors = validate_user(data, self.language, creating=creating, today=self.today)
        if errors:
            raise ValidationError(errors)

    def create_user(self, data: UserFormData) -> dict[str, Any] | None:
        """Validate and create. Raises ``ValidationError``; API failures set ``error_message``."""
        self.error_message = None
        self.success_message = None
        self.validate(data, creating=True)
        gym = self.auth.gym
        if gym is None or not gym.id:
            raise ValidationError({'email': self.language.t('no_gym')})

        payload: dict[str, Any] = {
            'email': data.email.strip(),
            'firstName': data.first_name.strip(),
            'lastName': data.last_name.strip(),
            'gymId': gym.id,
            'monthlyFee': amount_to_json(data.monthly_fee),
            'startDate': format_date(data.start_date),
        }
        if data.phone:
            payload['phone'] = data.phone
        if data.date_of_birth:
            payload['dateOfBirth'] = format_date(data.date_of_birth)

        try:
            response = self.api.create_user(payload)
        except ApiError as e:
            self.error_message = e.message or self.language.t('unexpected_error')
            return None

        created = response.get('user') or {}
        name = f"{created.get('firstName') or data.first_name} {created.get('lastName') or data.last_name}"
        self.success_message = self.language.t('user_created', name=name.strip())
        self.info("Created user", gym_id=gym.id)
        return response

    def update_user(self, user_id: str, data: UserFormData) -> dict[str, Any] | None:
        """Validate and update a member's profile."""
        self.error_message = None
        self.success_message = None
        self.validate(data, creating=False)

        payload: dict[str, Any] = {
            'email': data.email.strip(),
            'firstName': data.first_name.strip(),
            'lastName': data.last_name.strip(),
            'phone': data.phone or None,
            'dateOfBirth': format_date(data.date_of_birth),
            'gender': data.gender,
            'monthlyFee': amount_to_json(data.monthly_fee),
        }
        try:
            response = self.api.update_user(user_id, payload)
        except ApiError as e:
            self.error_message = e.message or self.language.t('unexpected_error')
            return None

        self.success_message = self.language.t('user_updated', name=data.full_name)
        return response

@dataclass
class SignUpForm:
    """Gym owner registration."""
    email: str = ""
    password: str = ""
    first_name: str = ""
    last_name: str = ""
    gym_name: str = ""
    gym_address: str = ""
    gym_phone: str = ""
    gym_email: str = ""
    monthly_fee: str = ""
    sinpe_phone: str = ""

    def validate(self, language: LanguagePreference) -> None:
        errors: dict[str, str] = {}
        if not self.email.strip():
            errors['email'] = language.t('email_required')
        elif not EMAIL_PATTERN.match(self.email):
            errors['email'] = language.t('email_invalid')
        if not self.password:
            errors['password'] = language.t('password_required')
        if not self.first_name.strip():
            errors['first_name'] = language.t('first_name_required')
        if not self.last_name.strip():
            errors['last_name'] = language.t('last_name_required')
        if not self.gym_name.strip():
            errors['gym_name'] = language.t('gym_name_required')
        if not self.gym_address.strip():
            errors['gym_address'] = language.t('gym_address_required')
        if self.gym_email and not EMAIL_PATTERN.match(self.gym_email):
            errors['gym_email'] = language.t('email_invalid')
        try:
            if Decimal(self.monthly_fee or '0') <= 0:
                errors['monthly_fee'] = language.t('monthly_fee_positive')
        except ArithmeticError:
            errors['monthly_fee'] = language.t('monthly_fee_positive')
        if not self.sinpe_phone.strip():
            errors['sinpe_phone'] = language.t('sinpe_phone_required')
        if errors:
            raise ValidationError(errors)

    def to_payload(self) -> dict[str, Any]:
        return {
            'email': self.email,
            'password': self.password,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'gymName': self.gym_name,
            'gymAddress': self.gym_address,
            'gymPhone': self.gym_phone,
            'gymEmail': self.gym_email,
            'monthlyFee': self.monthly_fee,
            'sinpePhone': self.sinpe_phone,
        }

    def submit(self, auth: AuthSession) -> str | None:
        """Validate and register; returns the success message."""
        self.validate(auth.language)
        return auth.sign_up(self.to_payload())
