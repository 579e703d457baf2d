"""Tests for the command line interface."""

import json
from unittest.mock import patch

import pytest

from forma.cli import create_parser
from forma.cli import main
from forma.config.types import ApiConfig
from forma.config.types import AppConfig
from forma.config.types import CheckoutConfig
from forma.config.types import LoggingConfig
from forma.config.types import MembershipsConfig
from forma.models.payment import PaymentRecord
from forma.models.payment import PaymentStatus
from forma.services.app_state import AppState
from forma.services.preferences import ThemePreference
from forma.services.storage import MemoryStorage
from forma.utils.cli_utils import CommandRegistry


@pytest.fixture
def app_state(api, auth, language, tmp_path):
    config = AppConfig(
        api=ApiConfig(),
        memberships=MembershipsConfig(),
        checkout=CheckoutConfig(),
        logging=LoggingConfig(),
        config_dir=str(tmp_path),
        state_dir=str(tmp_path),
    )
    return AppState(
        config=config,
        api=api,
        durable=MemoryStorage(),
        session=MemoryStorage(),
        language=language,
        theme=ThemePreference(MemoryStorage()),
        auth=auth,
    )

@pytest.fixture
def run(app_state, tmp_path):
    """Run the CLI against ``app_state`` instead of files on disk."""
    def _run(*argv):
        with patch.object(AppState, 'from_config', return_value=app_state):
            return main(['--config-dir', str(tmp_path), *argv])
    return _run

def test_parser_global_options_and_subcommand():
    args = create_parser().parse_args(['-v', 'payments', 'reject', 'p1', '--reason', 'Blurry'])

    assert args.verbose
    assert args.payment_id == 'p1'
    assert args.reason == 'Blurry'
    assert args.command_metadata.qualified_name == 'payments reject'

def test_parser_requires_a_subcommand():
    with pytest.raises(SystemExit):
        create_parser().parse_args(['payments'])

def test_registry_groups_subcommands():
    assert set(CommandRegistry.get_subcommands('payments')) == {'list', 'approve', 'reject', 'receipt'}
    assert CommandRegistry.get_command('toggle', 'prefs') is None
    assert CommandRegistry.get_command('theme', 'prefs').parent_command == 'prefs'

def test_theme_toggle_persists(tmp_path, capsys):
    assert main(['--config-dir', str(tmp_path), 'prefs', 'theme', 'toggle']) == 0
    assert "Theme set to dark." in capsys.readouterr().out

    state = json.loads((tmp_path / 'state.json').read_text(encoding='utf-8'))
    assert state['forma_theme'] == 'dark'

    assert main(['--config-dir', str(tmp_path), 'prefs', 'theme', 'toggle']) == 0
    assert "Theme set to light." in capsys.readouterr().out

def test_auth_status_when_signed_out(tmp_path, capsys):
    assert main(['--config-dir', str(tmp_path), 'auth', 'status']) == 0
    assert "not signed in" in capsys.readouterr().out

def test_command_requiring_gym_fails_when_signed_out(tmp_path, capsys):
    assert main(['--config-dir', str(tmp_path), 'payments', 'list']) == 1
    assert "not signed in" in capsys.readouterr().err

def test_invalid_config_exits_with_error(tmp_path, capsys):
    (tmp_path / 'config.yaml').write_text("api: [unclosed", encoding='utf-8')

    assert main(['--config-dir', str(tmp_path), 'auth', 'status']) == 1
    assert "Invalid YAML" in capsys.readouterr().err

def test_payments_list_json(run, api, payment_factory, capsys):
    api.get_payments.return_value = [
        PaymentRecord.from_dict(payment_factory('p1')),
        PaymentRecord.from_dict(payment_factory('p2', 'approved', 'Carlos', 'Rodríguez')),
    ]

    assert run('payments', 'list', '--search', 'carlos', '--format', 'json') == 0

    output = json.loads(capsys.readouterr().out)
    assert [p['id'] for p in output['payments']] == ['p2']
    assert output['counts']['pending'] == 1
    assert output['counts']['approved'] == 1

def test_payments_list_text(run, api, payment_factory, capsys):
    api.get_payments.return_value = [PaymentRecord.from_dict(payment_factory('p1'))]

    assert run('payments', 'list') == 0

    output = capsys.readouterr().out
    assert 'María González' in output
    assert 'REF-p1' in output

def test_payments_approve(run, api, payment_factory, capsys):
    api.get_payments.return_value = [PaymentRecord.from_dict(payment_factory('p1'))]
    api.update_payment.return_value = None

    assert run('payments', 'approve', 'p1') == 0

    api.update_payment.assert_called_once_with('p1', PaymentStatus.APPROVED, 'admin-1', None)
    assert "Payment approved." in capsys.readouterr().out

def test_payments_reject_with_reason(run, api, payment_factory):
    api.get_payments.return_value = [PaymentRecord.from_dict(payment_factory('p1'))]
    api.update_payment.return_value = None

    assert run('payments', 'reject', 'p1', '--reason', 'Blurry receipt') == 0

    api.update_payment.assert_called_once_with('p1', PaymentStatus.REJECTED, 'admin-1', 'Blurry receipt')

def test_approving_a_settled_payment_fails(run, api, payment_factory, capsys):
    api.get_payments.return_value = [PaymentRecord.from_dict(payment_factory('p1', 'approved'))]

    assert run('payments', 'approve', 'p1') == 1

    api.update_payment.assert_not_called()
    assert capsys.readouterr().err.strip()

def test_user_create_rejects_non_positive_fee(run, api, capsys):
    result = run('users', 'create', '--first-name', 'Ana', '--last-name', 'Mora',
                 '--email', 'ana@example.com', '--monthly-fee', '0')

    assert result == 1
    api.create_user.assert_not_called()
    assert "Invalid value for --monthly-fee" in capsys.readouterr().err

def test_user_create_rejects_unparseable_fee(capsys):
    with pytest.raises(SystemExit):
        create_parser().parse_args(['users', 'create', '--first-name', 'Ana', '--last-name', 'Mora',
                                    '--email', 'ana@example.com', '--monthly-fee', 'lots'])
    assert "invalid amount" in capsys.readouterr().err

def test_checkout_start_without_stripe_key(run, capsys):
    assert run('checkout', 'start', '--plan', 'monthly') == 1
    assert "Stripe is not configured" in capsys.readouterr().err

def test_help_lists_commands_by_category():
    epilog = create_parser().epilog
    assert "Manage: " in epilog
    assert "payments approve" in epilog
    assert "Billing: checkout start, checkout activate" in epilog

def test_payments_list_colors_statuses_on_a_terminal(run, api, app_state, payment_factory, capsys):
    api.get_payments.return_value = [PaymentRecord.from_dict(payment_factory('p1'))]
    app_state.theme.set_theme('dark')

    with patch('forma.cli._use_color', return_value=True):
        assert run('payments', 'list') == 0

    assert "\033[93mPending\033[0m" in capsys.readouterr().out

def test_payments_list_is_plain_when_piped(run, api, payment_factory, capsys):
    api.get_payments.return_value = [PaymentRecord.from_dict(payment_factory('p1'))]

    with patch('forma.cli._use_color', return_value=False):
        assert run('payments', 'list') == 0

    assert "\033[" not in capsys.readouterr().out
