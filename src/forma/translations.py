"""
English and Spanish message catalogues.

Lookups fall back to English and then to the key itself, so a missing
Spanish entry never breaks output.
"""

import locale
import os
from typing import Any, Literal


Language = Literal['en', 'es']

SUPPORTED_LANGUAGES: tuple[Language, ...] = ('en', 'es')
DEFAULT_LANGUAGE: Language = 'en'

TRANSLATIONS: dict[str, dict[str, str]] = {
    'en': {
        # Auth
        'sign_in': "Sign In",
        'sign_out': "Sign Out",
        'login_success': "Login successful!",
        'signed_out': "Signed out.",
        'not_signed_in': "You are not signed in. Run 'forma auth signin' first.",
        'no_gym': "Gym information not found",
        'invalid_auth_response': "The server response did not include user and gym details",
        'account_created_success': "Account created successfully!",
        'unexpected_error': "An unexpected error occurred. Please try again.",
        'forgot_password_email_sent': "If an account with this email exists, you will receive a password reset link.",
        'password_mismatch': "Passwords do not match",
        'password_too_short': "Password must be at least 8 characters long",
        'invalid_reset_token': "Invalid or missing reset token",
        'reset_password_success': "Password has been reset successfully! You can now sign in with your new password.",
        'session_cleared': "Session cleared.",

        # Memberships
        'memberships': "Memberships",
        'error_loading_memberships': "Error loading memberships",
        'no_memberships': "No memberships found",
        'member': "Member",
        'email': "Email",
        'phone': "Phone",
        'status': "Status",
        'monthly_fee': "Monthly fee",
        'start_date': "Start date",
        'end_date': "End date",
        'latest_payment': "Latest payment",

        # Payments
        'payments': "Payments",
        'error_loading_payments': "Error loading payments",
        'error_updating_payment': "Error updating payment",
        'no_payments': "No payments found",
        'amount': "Amount",
        'reference': "Reference",
        'payment_date': "Payment date",
        'payment_approved': "Payment approved.",
        'payment_rejected': "Payment rejected.",
        'payment_not_pending': "Only pending payments can be approved or rejected",
        'payment_not_found': "Payment not found",
        'transition_in_progress': "Another payment update is in progress",
        'no_receipt': "This payment has no receipt attached",
        'receipt_load_failed': "The receipt image could not be loaded.",
        'open_original': "Open original",
        'rejection_reason': "Rejection reason",

        # Statuses
        'status_all': "All",
        'status_active': "Active",
        'status_pending_payment': "Pending payment",
        'status_expired': "Expired",
        'status_inactive': "Inactive",
        'status_cancelled': "Cancelled",
        'status_pending': "Pending",
        'status_approved': "Approved",
        'status_rejected': "Rejected",

        # Users
        'first_name_required': "First name is required",
        'last_name_required': "Last name is required",
        'email_required': "Email is required",
        'email_invalid': "Invalid email format",
        'phone_invalid': "Invalid phone number",
        'min_age': "Must be at least 16 years old",
        'monthly_fee_positive': "Monthly fee must be greater than 0",
        'start_date_required': "Start date is required",
        'start_date_past': "Start date cannot be before today",
        'password_required': "Password is required",
        'gym_name_required': "Gym name is required",
        'gym_address_required': "Gym address is required",
        'sinpe_phone_required': "SINPE phone is required",
        'user_created': "User {name} created successfully. Payment details email has been sent.",
        'user_updated': "User {name} updated successfully.",
        'male': "Male",
        'female': "Female",
        'unspecified': "Unspecified",

        # Workouts
        'workout_empty': "Please add content to the workout",
        'workout_created': "Workout created successfully!",
        'workout_updated': "Workout updated successfully!",
        'workout_deleted': "Workout deleted.",
        'workout_not_found': "No workout on that date",
        'error_creating_workout': "Error creating workout",
        'error_updating_workout': "Error updating workout",
        'error_loading_workouts': "Error loading workouts",
        'error_connecting': "Error connecting to server",
        'workouts_exported': "Exported {count} workouts to {path}",

        # Checkout
        'monthly_plan': "Monthly Plan",
        'yearly_plan': "Yearly Plan",
        'per_month': "per month",
        'per_year': "per year",
        'invalid_plan': "Invalid plan",
        'payment_error': "Error processing payment. Please try again.",
        'payment_successful': "Payment Successful!",
        'gym_activated': "Your gym has been activated. You can now access all features of the Forma management system.",
        'gym_inactive': "Your gym is currently inactive",
        'activate_message': "Please select a plan to activate your gym management system",
        'checkout_url': "Complete your payment at: {url}",

        # Preferences
        'language_set': "Language set to {language}.",
        'theme_set': "Theme set to {theme}.",
    },
    'es': {
        'sign_in': "Iniciar Sesión",
        'sign_out': "Cerrar Sesión",
        'login_success': "¡Inicio de sesión exitoso!",
        'signed_out': "Sesión cerrada.",
        'not_signed_in': "No has iniciado sesión. Ejecuta 'forma auth signin' primero.",
        'no_gym': "No se encontró información del gimnasio",
        'invalid_auth_response': "La respuesta del servidor no incluyó los datos del usuario y del gimnasio",
        'account_created_success': "¡Cuenta creada exitosamente!",
        'unexpected_error': "Ocurrió un error inesperado. Por favor intenta de nuevo.",
        'forgot_password_email_sent': "Si existe una cuenta con este email, recibirás un enlace para restablecer la contraseña.",
        'password_mismatch': "Las contraseñas no coinciden",
        'password_too_short': "La contraseña debe tener al menos 8 caracteres",
        'invalid_reset_token': "Token de restablecimiento inválido o faltante",
        'reset_password_success': "¡La contraseña ha sido restablecida exitosamente! Ahora puedes iniciar sesión con tu nueva contraseña.",
        'session_cleared': "Sesión eliminada.",

        'memberships': "Membresías",
        'error_loading_memberships': "Error al cargar las membresías",
        'no_memberships': "No se encontraron membresías",
        'member': "Miembro",
        'email': "Email",
        'phone': "Teléfono",
        'status': "Estado",
        'monthly_fee': "Mensualidad",
        'start_date': "Fecha de inicio",
        'end_date': "Fecha de vencimiento",
        'latest_payment': "Último pago",

        'payments': "Pagos",
        'error_loading_payments': "Error al cargar los pagos",
        'error_updating_payment': "Error al actualizar el pago",
        'no_payments': "No se encontraron pagos",
        'amount': "Monto",
        'reference': "Referencia",
        'payment_date': "Fecha de pago",
        'payment_approved': "Pago aprobado.",
        'payment_rejected': "Pago rechazado.",
        'payment_not_pending': "Solo se pueden aprobar o rechazar pagos pendientes",
        'payment_not_found': "Pago no encontrado",
        'transition_in_progress': "Otra actualización de pago está en curso",
        'no_receipt': "Este pago no tiene comprobante adjunto",
        'receipt_load_failed': "No se pudo cargar la imagen del comprobante.",
        'open_original': "Abrir original",
        'rejection_reason': "Motivo del rechazo",

        'status_all': "Todos",
        'status_active': "Activo",
        'status_pending_payment': "Pago pendiente",
        'status_expired': "Vencido",
        'status_inactive': "Inactivo",
        'status_cancelled': "Cancelado",
        'status_pending': "Pendiente",
        'status_approved': "Aprobado",
        'status_rejected': "Rechazado",

        'first_name_required': "El nombre es requerido",
        'last_name_required': "El apellido es requerido",
        'email_required': "El email es requerido",
        'email_invalid': "Email inválido",
        'phone_invalid': "Número de teléfono inválido",
        'min_age': "Debe ser mayor de 16 años",
        'monthly_fee_positive': "La mensualidad debe ser mayor a 0",
        'start_date_required': "La fecha de inicio es requerida",
        'start_date_past': "La fecha de inicio no puede ser anterior a hoy",
        'password_required': "La contraseña es requerida",
        'gym_name_required': "El nombre del gimnasio es requerido",
        'gym_address_required': "La dirección del gimnasio es requerida",
        'sinpe_phone_required': "El teléfono SINPE es requerido",
        'user_created': "Usuario {name} creado exitosamente. Se ha enviado un email con los detalles de pago.",
        'user_updated': "Usuario {name} actualizado exitosamente.",
        'male': "Masculino",
        'female': "Femenino",
        'unspecified': "No especificado",

        'workout_empty': "Por favor agrega contenido al entrenamiento",
        'workout_created': "¡Entrenamiento creado exitosamente!",
        'workout_updated': "¡Entrenamiento actualizado exitosamente!",
        'workout_deleted': "Entrenamiento eliminado.",
        'workout_not_found': "No hay entrenamiento en esa fecha",
        'error_creating_workout': "Error al crear el entrenamiento",
        'error_updating_workout': "Error al actualizar el entrenamiento",
        'error_loading_workouts': "Error al cargar los entrenamientos",
        'error_connecting': "Error al conectar con el servidor",
        'workouts_exported': "Se exportaron {count} entrenamientos a {path}",

        'monthly_plan': "Plan Mensual",
        'yearly_plan': "Plan Anual",
        'per_month': "por mes",
        'per_year': "por año",
        'invalid_plan': "Plan inválido",
        'payment_error': "Error procesando el pago. Por favor intenta de nuevo.",
        'payment_successful': "¡Pago Exitoso!",
        'gym_activated': "Tu gimnasio ha sido activado. Ahora puedes acceder a todas las características del sistema de gestión Forma.",
        'gym_inactive': "Tu gimnasio está actualmente inactivo",
        'activate_message': "Por favor selecciona un plan para activar tu sistema de gestión de gimnasio",
        'checkout_url': "Completa tu pago en: {url}",

        'language_set': "Idioma configurado: {language}.",
        'theme_set': "Tema configurado: {theme}.",
    },
}

def translate(key: str, language: str = DEFAULT_LANGUAGE, **kwargs: Any) -> str:
    """Look up ``key`` in ``language``, falling back to English, then the key."""
    catalogue = TRANSLATIONS.get(language, {})
    text = catalogue.get(key) or TRANSLATIONS[DEFAULT_LANGUAGE].get(key) or key
    return text.format(**kwargs) if kwargs else text

def is_supported(language: str | None) -> bool:
    return language in SUPPORTED_LANGUAGES

def detect_language() -> Language:
    """Pick the UI language from the environment's locale settings."""
    for var in ('LC_ALL', 'LC_MESSAGES', 'LANG', 'LANGUAGE'):
        value = os.environ.get(var)
        if value:
            return 'es' if value.lower().startswith('es') else 'en'
    current = locale.getlocale()[0] or ''
    return 'es' if current.lower().startswith('es') else 'en'
