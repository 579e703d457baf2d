"""
Command line interface for the Forma gym administration client.
"""

import argparse
import getpass
import json
import sys
from collections.abc import Sequence
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any

from tabulate import tabulate

from forma.config.logging import setup_logging
from forma.config.settings import ConfigurationManager
from forma.exceptions import ConfigError
from forma.exceptions import FormaError
from forma.exceptions import ValidationError
from forma.exceptions import handle_errors
from forma.models.membership import MembershipRecord
from forma.models.payment import PaymentRecord
from forma.models.workout import WorkoutElement
from forma.models.workout import parse_workout_text
from forma.services.app_state import AppState
from forma.services.memberships_view import MEMBERSHIP_STATUSES
from forma.services.overlay import Receipt
from forma.services.payments_view import PAYMENT_STATUSES
from forma.services.preferences import LanguagePreference
from forma.services.preferences import ThemePreference
from forma.services.user_form import GENDERS
from forma.services.user_form import SignUpForm
from forma.services.user_form import UserFormData
from forma.services.workout_calendar import WorkoutCalendar
from forma.translations import SUPPORTED_LANGUAGES
from forma.utils.cli_utils import CLIBuilder
from forma.utils.cli_utils import CLIContext
from forma.utils.cli_utils import CLIOptionFactory
from forma.utils.cli_utils import CommandCategory
from forma.utils.cli_utils import CommandRegistry
from forma.utils.cli_utils import create_command_group
from forma.utils.cli_utils import validate_args
from forma.utils.formatting import format_currency
from forma.utils.formatting import format_date
from forma.utils.formatting import month_name
from forma.utils.logging_utils import get_logger


def _fail(message: str) -> int:
    print(message, file=sys.stderr)
    return 1

def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False, default=str))

def _use_color() -> bool:
    return sys.stdout.isatty()

def _status_label(language: LanguagePreference, status: str, theme: ThemePreference | None = None) -> str:
    label = language.t(f"status_{status}")
    return theme.paint_status(label, status) if theme is not None else label

def _membership_rows(
    records: list[MembershipRecord],
    language: LanguagePreference,
    theme: ThemePreference | None = None
) -> list[list[Any]]:
    lang = language.language
    rows = []
    for record in records:
        latest = record.latest_payment
        rows.append([
            record.id,
            record.user.full_name,
            record.user.email,
            _status_label(language, record.status.value, theme),
            format_currency(record.monthly_fee, lang),
            format_date(record.start_date, lang),
            _status_label(language, latest.status.value, theme) if latest else "-",
        ])
    return rows

def _payment_rows(
    records: list[PaymentRecord],
    language: LanguagePreference,
    theme: ThemePreference | None = None
) -> list[list[Any]]:
    lang = language.language
    return [
        [
            record.id,
            record.user.full_name,
            format_currency(record.amount, lang),
            record.sinpe_reference or "-",
            format_date(record.payment_date, lang),
            _status_label(language, record.status.value, theme),
            "yes" if record.has_receipt else "no",
        ]
        for record in records
    ]

def _print_receipt(receipt: Receipt, language: LanguagePreference) -> None:
    viewer = receipt.viewer
    info = viewer.info
    print(viewer.image_url)
    if info is None:
        return
    lang = language.language
    details = [
        [language.t('member'), info.member_name or "-"],
        [language.t('amount'), format_currency(info.amount, lang) if info.amount is not None else "-"],
        [language.t('payment_date'), format_date(info.date, lang)],
        [language.t('reference'), info.reference or "-"],
        [language.t('phone'), info.phone or "-"],
    ]
    print(tabulate(details, tablefmt='plain'))

def _fee_arg(value: str) -> Decimal:
    try:
        return Decimal(value)
    except ArithmeticError:
        raise argparse.ArgumentTypeError(f"invalid amount: {value!r}") from None

def _user_form_options(creating: bool) -> list[dict[str, Any]]:
    required = creating
    return [
        {'name': '--first-name', 'required': required, 'help': 'First name'},
        {'name': '--last-name', 'required': required, 'help': 'Last name'},
        {'name': '--email', 'required': required, 'help': 'Email address'},
        {'name': '--phone', 'help': 'Phone number'},
        {'name': '--date-of-birth', 'type': date.fromisoformat, 'help': 'Birth date in YYYY-MM-DD format'},
        {'name': '--gender', 'choices': list(GENDERS), 'help': 'Gender'},
        {
            'name': '--monthly-fee',
            'type': _fee_arg,
            'help': "Monthly fee in colones (default: the gym's fee)",
            'validator': lambda x: x > 0
        },
    ]

def _form_values(args: argparse.Namespace) -> dict[str, Any]:
    return {
        'first_name': args.first_name,
        'last_name': args.last_name,
        'email': args.email,
        'phone': args.phone,
        'date_of_birth': args.date_of_birth,
        'gender': args.gender,
        'monthly_fee': args.monthly_fee,
    }

@create_command_group('auth', 'Sign in, sign out and password recovery', CommandCategory.AUTH)
class AuthCommands:
    """Authentication commands."""

    @staticmethod
    @CommandRegistry.register(
        name='signin',
        help_text='Sign in as a gym administrator',
        category=CommandCategory.AUTH,
        options=[
            {'name': '--email', 'required': True, 'help': 'Account email'},
            {'name': '--password', 'help': 'Account password (prompted when omitted)'},
            {
                'name': '--remember-me',
                'action': 'store_true',
                'help': 'Stay signed in across terminal sessions'
            }
        ],
        parent_command='auth'
    )
    def signin(ctx: CLIContext) -> int:
        auth = ctx.state.auth
        password = ctx.args.password or getpass.getpass()
        if not auth.sign_in(ctx.args.email, password, remember_me=ctx.args.remember_me):
            return _fail(auth.error_message or auth.language.t('unexpected_error'))
        print(auth.language.t('login_success'))
        if not auth.is_gym_active:
            print(auth.language.t('gym_inactive'))
        return 0

    @staticmethod
    @CommandRegistry.register(
        name='signup',
        help_text='Register a new gym and its owner account',
        category=CommandCategory.AUTH,
        options=[
            {'name': '--email', 'required': True, 'help': 'Owner email'},
            {'name': '--password', 'help': 'Owner password (prompted when omitted)'},
            {'name': '--first-name', 'required': True, 'help': 'Owner first name'},
            {'name': '--last-name', 'required': True, 'help': 'Owner last name'},
            {'name': '--gym-name', 'required': True, 'help': 'Gym name'},
            {'name': '--gym-address', 'required': True, 'help': 'Gym address'},
            {'name': '--gym-phone', 'default': '', 'help': 'Gym phone'},
            {'name': '--gym-email', 'default': '', 'help': 'Gym contact email'},
            {'name': '--monthly-fee', 'required': True, 'help': 'Default monthly fee in colones'},
            {'name': '--sinpe-phone', 'required': True, 'help': 'Phone number receiving SINPE payments'}
        ],
        parent_command='auth'
    )
    def signup(ctx: CLIContext) -> int:
        auth = ctx.state.auth
        args = ctx.args
        form = SignUpForm(
            email=args.email,
            password=args.password or getpass.getpass(),
            first_name=args.first_name,
            last_name=args.last_name,
            gym_name=args.gym_name,
            gym_address=args.gym_address,
            gym_phone=args.gym_phone,
            gym_email=args.gym_email,
            monthly_fee=args.monthly_fee,
            sinpe_phone=args.sinpe_phone,
        )
        message = form.submit(auth)
        if message is None:
            return _fail(auth.error_message or auth.language.t('unexpected_error'))
        print(message)
        return 0

    @staticmethod
    @CommandRegistry.register(
        name='signout',
        help_text='Sign out and forget the stored session',
        category=CommandCategory.AUTH,
        parent_command='auth'
    )
    def signout(ctx: CLIContext) -> int:
        ctx.state.auth.sign_out()
        print(ctx.state.language.t('signed_out'))
        return 0

    @staticmethod
    @CommandRegistry.register(
        name='status',
        help_text='Show the signed-in user and gym',
        category=CommandCategory.AUTH,
        options=[CLIOptionFactory.create_format_option()],
        parent_command='auth'
    )
    def status(ctx: CLIContext) -> int:
        auth = ctx.state.auth
        if ctx.args.format == 'json':
            _print_json({
                'authenticated': auth.is_authenticated,
                'user': auth.user.to_dict() if auth.user else None,
                'gym': auth.gym.to_dict() if auth.gym else None,
                'language': ctx.state.language.language,
                'theme': ctx.state.theme.theme,
            })
            return 0

        if not auth.is_authenticated:
            print(auth.language.t('not_signed_in'))
            return 0
        gym = auth.gym
        rows = [
            ['User', auth.user.email if auth.user else '-'],
            ['Gym', gym.name if gym else '-'],
            ['Active', 'yes' if auth.is_gym_active else 'no'],
            [auth.language.t('monthly_fee'), format_currency(gym.monthly_fee, auth.language.language) if gym else '-'],
        ]
        print(tabulate(rows, tablefmt='plain'))
        return 0

    @staticmethod
    @CommandRegistry.register(
        name='forgot-password',
        help_text='Send a password reset link',
        category=CommandCategory.AUTH,
        options=[{'name': '--email', 'required': True, 'help': 'Account email'}],
        parent_command='auth'
    )
    def forgot_password(ctx: CLIContext) -> int:
        auth = ctx.state.auth
        if not auth.forgot_password(ctx.args.email):
            return _fail(auth.error_message or auth.language.t('unexpected_error'))
        print(auth.language.t('forgot_password_email_sent'))
        return 0

    @staticmethod
    @CommandRegistry.register(
        name='reset-password',
        help_text='Set a new password using the tokens from a reset link',
        category=CommandCategory.AUTH,
        options=[
            {'name': '--access-token', 'required': True, 'help': 'access_token from the reset link'},
            {'name': '--refresh-token', 'required': True, 'help': 'refresh_token from the reset link'},
            {'name': '--password', 'help': 'New password (prompted when omitted)'},
            {'name': '--confirm-password', 'help': 'New password again (prompted when omitted)'}
        ],
        parent_command='auth'
    )
    def reset_password(ctx: CLIContext) -> int:
        auth = ctx.state.auth
        password = ctx.args.password or getpass.getpass('New password: ')
        confirm = ctx.args.confirm_password or getpass.getpass('Confirm password: ')
        if not auth.reset_password(ctx.args.access_token, ctx.args.refresh_token, password, confirm):
            return _fail(auth.error_message or auth.language.t('unexpected_error'))
        print(auth.language.t('reset_password_success'))
        return 0

@create_command_group('memberships', 'Browse gym memberships', CommandCategory.LIST)
class MembershipCommands:
    """Membership commands."""

    @staticmethod
    @CommandRegistry.register(
        name='list',
        help_text='List memberships of the signed-in gym',
        category=CommandCategory.LIST,
        options=[
            CLIOptionFactory.create_status_option(MEMBERSHIP_STATUSES),
            CLIOptionFactory.create_search_option(),
            CLIOptionFactory.create_format_option()
        ],
        parent_command='memberships'
    )
    def list_memberships(ctx: CLIContext) -> int:
        ctx.state.auth.require_gym()
        view = ctx.state.memberships_view()
        try:
            view.filters.status_filter = ctx.args.status
            view.load()
            records = view.set_search(ctx.args.search)
        finally:
            view.close()

        if view.error_message:
            print(view.error_message, file=sys.stderr)
            if not view.store.records:
                return 1

        language = view.language
        if ctx.args.format == 'json':
            _print_json({
                'memberships': [record.to_dict() for record in records],
                'counts': view.counts,
            })
            return 0

        if not records:
            print(language.t('no_memberships'))
            return 0
        headers = ['ID', language.t('member'), language.t('email'), language.t('status'),
                   language.t('monthly_fee'), language.t('start_date'), language.t('latest_payment')]
        theme = ctx.state.theme if _use_color() else None
        print(tabulate(_membership_rows(records, language, theme), headers=headers))
        return 0

    @staticmethod
    @CommandRegistry.register(
        name='receipt',
        help_text="Show the receipt of a membership's latest payment",
        category=CommandCategory.LIST,
        options=[{'name': 'membership_id', 'help': 'Membership ID'}],
        parent_command='memberships'
    )
    def receipt(ctx: CLIContext) -> int:
        ctx.state.auth.require_gym()
        view = ctx.state.memberships_view()
        try:
            if not view.load():
                return _fail(view.error_message or view.language.t('error_loading_memberships'))
            opened = view.open_receipt(ctx.args.membership_id)
            if opened is None:
                return _fail(view.language.t('no_receipt'))
            _print_receipt(opened, view.language)
        finally:
            view.close()
        return 0

@create_command_group('payments', 'Review and approve member payments', CommandCategory.MANAGE)
class PaymentCommands:
    """Payment commands."""

    @staticmethod
    @CommandRegistry.register(
        name='list',
        help_text='List payments of the signed-in gym',
        category=CommandCategory.MANAGE,
        options=[
            CLIOptionFactory.create_status_option(PAYMENT_STATUSES),
            CLIOptionFactory.create_search_option(),
            CLIOptionFactory.create_format_option()
        ],
        parent_command='payments'
    )
    def list_payments(ctx: CLIContext) -> int:
        ctx.state.auth.require_gym()
        view = ctx.state.payments_view()
        try:
            view.filters.status_filter = ctx.args.status
            loaded = view.load()
            records = view.set_search(ctx.args.search)
        finally:
            view.close()

        if not loaded:
            return _fail(view.error_message or view.language.t('error_loading_payments'))

        language = view.language
        if ctx.args.format == 'json':
            _print_json({
                'payments': [record.to_dict() for record in records],
                'counts': view.counts,
            })
            return 0

        if not records:
            print(language.t('no_payments'))
            return 0
        headers = ['ID', language.t('member'), language.t('amount'), language.t('reference'),
                   language.t('payment_date'), language.t('status'), 'Receipt']
        theme = ctx.state.theme if _use_color() else None
        print(tabulate(_payment_rows(records, language, theme), headers=headers))
        return 0

    @staticmethod
    @CommandRegistry.register(
        name='approve',
        help_text='Approve a pending payment',
        category=CommandCategory.MANAGE,
        options=[{'name': 'payment_id', 'help': 'Payment ID'}],
        parent_command='payments'
    )
    def approve(ctx: CLIContext) -> int:
        ctx.state.auth.require_gym()
        view = ctx.state.payments_view()
        try:
            if not view.load():
                return _fail(view.error_message or view.language.t('error_loading_payments'))
            if not view.approve(ctx.args.payment_id):
                return _fail(view.error_message or view.language.t('error_updating_payment'))
        finally:
            view.close()
        print(view.language.t('payment_approved'))
        return 0

    @staticmethod
    @CommandRegistry.register(
        name='reject',
        help_text='Reject a pending payment',
        category=CommandCategory.MANAGE,
        options=[
            {'name': 'payment_id', 'help': 'Payment ID'},
            {'name': '--reason', 'default': '', 'help': 'Reason shown to the member'}
        ],
        parent_command='payments'
    )
    def reject(ctx: CLIContext) -> int:
        ctx.state.auth.require_gym()
        view = ctx.state.payments_view()
        try:
            if not view.load():
                return _fail(view.error_message or view.language.t('error_loading_payments'))
            view.request_reject(ctx.args.payment_id)
            if not view.confirm_reject(ctx.args.reason):
                return _fail(view.error_message or view.language.t('error_updating_payment'))
        finally:
            view.close()
        print(view.language.t('payment_rejected'))
        return 0

    @staticmethod
    @CommandRegistry.register(
        name='receipt',
        help_text='Show the receipt attached to a payment',
        category=CommandCategory.MANAGE,
        options=[{'name': 'payment_id', 'help': 'Payment ID'}],
        parent_command='payments'
    )
    def receipt(ctx: CLIContext) -> int:
        ctx.state.auth.require_gym()
        view = ctx.state.payments_view()
        try:
            if not view.load():
                return _fail(view.error_message or view.language.t('error_loading_payments'))
            opened = view.open_receipt(ctx.args.payment_id)
            if opened is None:
                return _fail(view.language.t('no_receipt'))
            _print_receipt(opened, view.language)
        finally:
            view.close()
        return 0

@create_command_group('users', 'Create and edit gym members', CommandCategory.MANAGE)
class UserCommands:
    """Member management commands."""

    @staticmethod
    @CommandRegistry.register(
        name='create',
        help_text='Create a member and their first membership',
        category=CommandCategory.MANAGE,
        options=[
            *_user_form_options(creating=True),
            {'name': '--start-date', 'type': date.fromisoformat, 'help': 'Membership start date (default: today)'}
        ],
        parent_command='users'
    )
    def create(ctx: CLIContext) -> int:
        ctx.state.auth.require_gym()
        form = ctx.state.user_form()
        data = form.new_data(**_form_values(ctx.args), start_date=ctx.args.start_date)
        if form.create_user(data) is None:
            return _fail(form.error_message or form.language.t('unexpected_error'))
        print(form.success_message)
        return 0

    @staticmethod
    @CommandRegistry.register(
        name='update',
        help_text="Update the profile of a membership's member",
        category=CommandCategory.MANAGE,
        options=[
            {'name': 'membership_id', 'help': 'Membership ID'},
            *_user_form_options(creating=False)
        ],
        parent_command='users'
    )
    def update(ctx: CLIContext) -> int:
        ctx.state.auth.require_gym()
        view = ctx.state.memberships_view()
        try:
            if not view.load():
                return _fail(view.error_message or view.language.t('error_loading_memberships'))
            try:
                edit = view.open_edit_user(ctx.args.membership_id)
            except KeyError:
                return _fail(f"Membership not found: {ctx.args.membership_id}")
            record = view.store.get(edit.record_id)
        finally:
            view.close()

        form = ctx.state.user_form()
        data: UserFormData = form.from_membership(record)
        for name, value in _form_values(ctx.args).items():
            if value is not None:
                setattr(data, name, value)
        if form.update_user(record.user_id, data) is None:
            return _fail(form.error_message or form.language.t('unexpected_error'))
        print(form.success_message)
        return 0

@create_command_group('workouts', 'Daily workouts calendar', CommandCategory.MANAGE)
class WorkoutCommands:
    """Workout calendar commands."""

    @staticmethod
    @CommandRegistry.register(
        name='list',
        help_text="List a month's workouts",
        category=CommandCategory.MANAGE,
        options=[*CLIOptionFactory.create_month_options(), CLIOptionFactory.create_format_option()],
        parent_command='workouts'
    )
    def list_workouts(ctx: CLIContext) -> int:
        ctx.state.auth.require_gym()
        calendar = WorkoutCommands._calendar_for(ctx, ctx.args.year, ctx.args.month)
        if not calendar.load():
            return _fail(calendar.error_message or calendar.language.t('error_loading_workouts'))

        workouts = [calendar.workouts[day] for day in sorted(calendar.workouts)]
        if ctx.args.format == 'json':
            _print_json({'workouts': [workout.to_dict() for workout in workouts]})
            return 0

        language = calendar.language.language
        print(f"{month_name(calendar.month, language)} {calendar.year}")
        if not workouts:
            return 0
        rows = [
            [format_date(workout.workout_date, language), workout.workout_text]
            for workout in workouts
        ]
        print(tabulate(rows, headers=['Date', 'Workout'], tablefmt='grid'))
        return 0

    @staticmethod
    @CommandRegistry.register(
        name='save',
        help_text="Create or replace a day's workout",
        category=CommandCategory.MANAGE,
        options=[
            CLIOptionFactory.create_date_argument(),
            {'name': '--title', 'help': 'Title shown first'},
            {
                'name': '--text',
                'action': 'append',
                'default': [],
                'help': 'Text block; repeat for several blocks'
            },
            {
                'name': '--file',
                'type': Path,
                'help': "Read the workout from a file; lines starting with '# ' are titles"
            }
        ],
        parent_command='workouts'
    )
    def save(ctx: CLIContext) -> int:
        ctx.state.auth.require_gym()
        day: date = ctx.args.date
        elements: list[WorkoutElement] = []
        if ctx.args.title:
            elements.append(WorkoutElement.title(ctx.args.title))
        elements.extend(WorkoutElement.text(text) for text in ctx.args.text)
        if ctx.args.file:
            elements.extend(parse_workout_text(ctx.args.file.read_text(encoding='utf-8')))

        calendar = WorkoutCommands._calendar_for(ctx, day.year, day.month)
        calendar.load()
        if not calendar.save(day, elements):
            return _fail(calendar.error_message or calendar.language.t('unexpected_error'))
        print(calendar.success_message)
        return 0

    @staticmethod
    @CommandRegistry.register(
        name='delete',
        help_text="Delete a day's workout",
        category=CommandCategory.MANAGE,
        options=[CLIOptionFactory.create_date_argument()],
        parent_command='workouts'
    )
    def delete(ctx: CLIContext) -> int:
        ctx.state.auth.require_gym()
        day: date = ctx.args.date
        calendar = WorkoutCommands._calendar_for(ctx, day.year, day.month)
        if not calendar.load():
            return _fail(calendar.error_message or calendar.language.t('error_loading_workouts'))
        if not calendar.delete(day):
            return _fail(calendar.error_message or calendar.language.t('unexpected_error'))
        print(calendar.success_message)
        return 0

    @staticmethod
    @CommandRegistry.register(
        name='export',
        help_text="Export a month's workouts to an iCalendar file",
        category=CommandCategory.MANAGE,
        options=[
            {'name': 'file', 'type': Path, 'help': 'Output .ics file'},
            *CLIOptionFactory.create_month_options()
        ],
        parent_command='workouts'
    )
    def export(ctx: CLIContext) -> int:
        ctx.state.auth.require_gym()
        calendar = WorkoutCommands._calendar_for(ctx, ctx.args.year, ctx.args.month)
        if not calendar.load():
            return _fail(calendar.error_message or calendar.language.t('error_loading_workouts'))
        count = calendar.export_ics(ctx.args.file)
        print(calendar.language.t('workouts_exported', count=count, path=ctx.args.file))
        return 0

    @staticmethod
    def _calendar_for(ctx: CLIContext, year: int | None, month: int | None) -> WorkoutCalendar:
        calendar = ctx.state.workout_calendar()
        if year:
            calendar.year = year
        if month:
            calendar.month = month
        return calendar

@create_command_group('checkout', 'Gym subscription checkout', CommandCategory.BILLING)
class CheckoutCommands:
    """Subscription checkout commands."""

    @staticmethod
    @CommandRegistry.register(
        name='start',
        help_text='Create a Stripe checkout session for the signed-in gym',
        category=CommandCategory.BILLING,
        options=[
            {'name': '--plan', 'choices': ['monthly', 'yearly'], 'required': True, 'help': 'Subscription plan'},
            {'name': '--origin', 'default': 'https://formacr.com', 'help': 'Site the checkout returns to'},
            CLIOptionFactory.create_format_option()
        ],
        parent_command='checkout'
    )
    def start(ctx: CLIContext) -> int:
        gym = ctx.state.auth.require_gym()
        session = ctx.state.checkout().create_session(ctx.args.plan, gym.id, ctx.args.origin)
        if ctx.args.format == 'json':
            _print_json(session)
        else:
            print(ctx.state.language.t('checkout_url', url=session['url'] or session['sessionId']))
        return 0

    @staticmethod
    @CommandRegistry.register(
        name='activate',
        help_text='Activate the gym after a completed checkout',
        category=CommandCategory.BILLING,
        options=[{'name': '--gym-id', 'help': 'Gym to activate (default: the signed-in gym)'}],
        parent_command='checkout'
    )
    def activate(ctx: CLIContext) -> int:
        checkout = ctx.state.checkout()
        if not checkout.activate_gym(ctx.args.gym_id):
            return _fail(checkout.error_message or ctx.state.language.t('payment_error'))
        print(ctx.state.language.t('gym_activated'))
        return 0

@create_command_group('prefs', 'Language and theme preferences', CommandCategory.SETTINGS)
class PreferenceCommands:
    """Preference commands."""

    @staticmethod
    @CommandRegistry.register(
        name='language',
        help_text='Set the interface language',
        category=CommandCategory.SETTINGS,
        options=[{'name': 'language', 'choices': list(SUPPORTED_LANGUAGES), 'help': 'Language code'}],
        parent_command='prefs'
    )
    def language(ctx: CLIContext) -> int:
        preference = ctx.state.language
        preference.set_language(ctx.args.language)
        print(preference.t('language_set', language=preference.language))
        return 0

    @staticmethod
    @CommandRegistry.register(
        name='theme',
        help_text='Set or toggle the color theme',
        category=CommandCategory.SETTINGS,
        options=[{'name': 'theme', 'choices': ['light', 'dark', 'toggle'], 'help': 'Theme, or toggle'}],
        parent_command='prefs'
    )
    def theme(ctx: CLIContext) -> int:
        theme = ctx.state.theme
        if ctx.args.theme == 'toggle':
            theme.toggle()
        else:
            theme.set_theme(ctx.args.theme)
        print(ctx.state.language.t('theme_set', theme=theme.theme))
        return 0

COMMAND_GROUPS = [
    AuthCommands,
    MembershipCommands,
    PaymentCommands,
    UserCommands,
    WorkoutCommands,
    CheckoutCommands,
    PreferenceCommands,
]

def create_parser() -> argparse.ArgumentParser:
    """Create argument parser from the registered commands."""
    builder = CLIBuilder(
        description='Forma gym administration: memberships, payments, members and workouts',
        prog='forma'
    )
    for group in COMMAND_GROUPS:
        builder.add_group(group.command_group)

    for command in CommandRegistry.commands():
        builder.add_command(command)

    return builder.build()

def _report_error(error: FormaError) -> int:
    if isinstance(error, ValidationError):
        for field_name, message in error.field_errors.items():
            print(f"{field_name}: {message}", file=sys.stderr)
        return 1
    return _fail(error.message)

def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        config = ConfigurationManager(args.config_dir).load_config()
    except ConfigError as e:
        return _fail(str(e))

    setup_logging(config, verbose=args.verbose, log_file=args.log_file)
    logger = get_logger(__name__)

    command = args.command_metadata
    errors = validate_args(args, command)
    if errors:
        for error in errors:
            print(error, file=sys.stderr)
        return 1

    try:
        with handle_errors('cli', command.qualified_name):
            state = AppState.from_config(config)
            ctx = CLIContext(args=args, logger=logger, config=config, parser=parser, state=state)
            return command.handler(ctx)
    except FormaError as e:
        return _report_error(e)
    except (OSError, ValueError) as e:
        return _fail(str(e))

if __name__ == '__main__':
    sys.exit(main())
