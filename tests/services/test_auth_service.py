"""Tests for the authentication session and its stores."""

import os
import time

import pytest

from forma.error_codes import ErrorCode
from forma.exceptions import ApiConnectionError, ApiResponseError, AuthError
from forma.services.auth_service import GYM_KEY, USER_KEY, AuthSession
from forma.services.storage import FileStorage, MemoryStorage, SessionFileStorage


@pytest.fixture
def stores():
    return MemoryStorage(), MemoryStorage()

@pytest.fixture
def session(api, stores, language):
    durable, ephemeral = stores
    return AuthSession(api, durable, ephemeral, language=language)

@pytest.fixture
def signin_response(user_data, gym_data):
    return {'user': user_data, 'gym': gym_data}

def test_sign_in_without_remember_me_uses_session_store(api, session, stores, signin_response):
    durable, ephemeral = stores
    api.sign_in.return_value = signin_response

    assert session.sign_in('admin@formacr.com', 'secret123')

    assert session.is_authenticated
    assert session.gym.name == 'Forma Escazú'
    assert USER_KEY in ephemeral
    assert USER_KEY not in durable

def test_sign_in_with_remember_me_uses_durable_store(api, session, stores, signin_response):
    durable, ephemeral = stores
    ephemeral.set(USER_KEY, {'id': 'old'})
    api.sign_in.return_value = signin_response

    session.sign_in('admin@formacr.com', 'secret123', remember_me=True)

    assert durable.get(GYM_KEY)['id'] == 'gym-1'
    assert USER_KEY not in ephemeral

def test_sign_in_failure_sets_error(api, session):
    api.sign_in.side_effect = ApiResponseError(401, "Invalid login credentials")

    assert not session.sign_in('admin@formacr.com', 'wrong')
    assert session.error_message == "Invalid login credentials"
    assert not session.is_authenticated
    assert not session.is_loading

def test_sign_in_without_gym_is_rejected(api, session, user_data):
    api.sign_in.return_value = {'user': user_data}
    assert not session.sign_in('admin@formacr.com', 'secret123')
    assert "user and gym" in session.error_message

def test_restore_prefers_durable_store(api, stores, language, user_data, gym_data):
    durable, ephemeral = stores
    durable.set(USER_KEY, user_data)
    durable.set(GYM_KEY, gym_data)
    ephemeral.set(USER_KEY, {'id': 'other', 'email': 'other@formacr.com'})
    ephemeral.set(GYM_KEY, {'id': 'gym-2', 'name': 'Other'})

    session = AuthSession(api, durable, ephemeral, language=language)

    assert session.restore()
    assert session.gym.id == 'gym-1'
    api.sign_in.assert_not_called()

def test_restore_discards_corrupted_data(api, stores, language):
    durable, ephemeral = stores
    durable.set(USER_KEY, {'email': 'missing-id@formacr.com'})
    durable.set(GYM_KEY, {'name': 'No id'})

    session = AuthSession(api, durable, ephemeral, language=language)

    assert not session.restore()
    assert USER_KEY not in durable
    assert GYM_KEY not in durable

def test_sign_out_clears_even_when_api_fails(auth, api):
    auth.durable.set(USER_KEY, {'id': 'admin-1'})
    api.sign_out.side_effect = ApiConnectionError("offline")

    auth.sign_out()

    assert not auth.is_authenticated
    assert auth.gym is None
    assert USER_KEY not in auth.durable

def test_require_gym(api, session, auth):
    with pytest.raises(AuthError) as exc_info:
        session.require_gym()
    assert exc_info.value.code is ErrorCode.NOT_AUTHENTICATED

    assert auth.require_gym().id == 'gym-1'

    auth.gym = None
    with pytest.raises(AuthError) as exc_info:
        auth.require_gym()
    assert exc_info.value.code is ErrorCode.NO_TENANT

def test_refresh_gym_status_persists(api, session, stores, signin_response):
    durable, ephemeral = stores
    signin_response['gym']['is_active'] = False
    api.sign_in.return_value = signin_response
    session.sign_in('admin@formacr.com', 'secret123', remember_me=True)
    assert not session.is_gym_active

    session.refresh_gym_status()

    assert session.is_gym_active
    assert durable.get(GYM_KEY)['is_active'] is True

@pytest.mark.parametrize("password,confirm,message", [
    ("secret123", "secret124", "Passwords do not match"),
    ("short", "short", "Password must be at least 8 characters long"),
])
def test_reset_password_validation(api, session, password, confirm, message):
    assert not session.reset_password('access', 'refresh', password, confirm)
    assert session.error_message == message
    api.reset_password.assert_not_called()

def test_reset_password_requires_tokens(api, session):
    assert not session.reset_password('', 'refresh', 'secret123', 'secret123')
    assert session.error_message == "Invalid or missing reset token"

def test_reset_password_success(api, session):
    assert session.reset_password('access', 'refresh', 'secret123', 'secret123')
    api.reset_password.assert_called_once_with('access', 'refresh', 'secret123')

def test_sign_up_returns_backend_message(api, session):
    api.sign_up.return_value = {'message': 'Check your email'}
    assert session.sign_up({'email': 'owner@gym.cr'}) == 'Check your email'

def test_file_storage_round_trip(tmp_path):
    store = FileStorage(tmp_path / 'state.json')
    store.set('forma_theme', 'dark')
    assert FileStorage(tmp_path / 'state.json').get('forma_theme') == 'dark'
    store.remove('forma_theme')
    assert 'forma_theme' not in store
    store.set('x', 1)
    store.clear()
    assert not (tmp_path / 'state.json').exists()

def test_file_storage_ignores_corrupt_file(tmp_path):
    path = tmp_path / 'state.json'
    path.write_text('{not json', encoding='utf-8')
    assert FileStorage(path).get('forma_user') is None

def test_session_storage_is_scoped_by_session(tmp_path):
    first = SessionFileStorage(tmp_path, session_id='100')
    second = SessionFileStorage(tmp_path, session_id='200')
    first.set(USER_KEY, {'id': 'admin-1'})
    assert second.get(USER_KEY) is None
    assert first.path == tmp_path / 'sessions' / '100.json'

def test_session_only_sign_in_survives_a_new_auth_session(api, stores, language, signin_response):
    durable, ephemeral = stores
    api.sign_in.return_value = signin_response
    AuthSession(api, durable, ephemeral, language=language).sign_in('admin@formacr.com', 'secret123')
    api.reset_mock()

    later = AuthSession(api, durable, ephemeral, language=language)

    assert later.restore()
    assert later.user.id == 'admin-1'
    assert not api.method_calls

def test_cleared_session_store_restores_nothing(api, stores, language, signin_response):
    durable, ephemeral = stores
    api.sign_in.return_value = signin_response
    AuthSession(api, durable, ephemeral, language=language).sign_in('admin@formacr.com', 'secret123')

    ephemeral.clear()

    assert not AuthSession(api, durable, ephemeral, language=language).restore()

def test_reused_session_id_from_another_shell_starts_signed_out(api, tmp_path, language, signin_response):
    api.sign_in.return_value = signin_response
    first_shell = SessionFileStorage(tmp_path, session_id='4242', owner='1001')
    AuthSession(api, MemoryStorage(), first_shell, language=language).sign_in('admin@formacr.com', 'secret123')

    same_shell = SessionFileStorage(tmp_path, session_id='4242', owner='1001')
    assert AuthSession(api, MemoryStorage(), same_shell, language=language).restore()

    new_shell = SessionFileStorage(tmp_path, session_id='4242', owner='2002')
    assert not AuthSession(api, MemoryStorage(), new_shell, language=language).restore()
    assert not new_shell.path.exists()

def test_session_storage_prunes_idle_session_files(tmp_path):
    stale = SessionFileStorage(tmp_path, session_id='100')
    stale.set(USER_KEY, {'id': 'admin-1'})
    fresh = SessionFileStorage(tmp_path, session_id='200')
    fresh.set(USER_KEY, {'id': 'admin-2'})
    two_days_ago = time.time() - 2 * 24 * 3600
    os.utime(stale.path, (two_days_ago, two_days_ago))

    SessionFileStorage(tmp_path, session_id='300')

    assert not stale.path.exists()
    assert fresh.get(USER_KEY) == {'id': 'admin-2'}

def test_session_storage_uses_forma_session_variable(tmp_path, monkeypatch):
    monkeypatch.setenv('FORMA_SESSION', 'tmux-3')
    store = SessionFileStorage(tmp_path)
    assert store.session_id == 'tmux-3'
    assert store.path == tmp_path / 'sessions' / 'tmux-3.json'
