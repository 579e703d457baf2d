"""API clients for the Forma backend."""

from .activation import ActivationAPI
from .base_api import BaseAPI
from .forma_api import FormaAPI

__all__ = ['ActivationAPI', 'BaseAPI', 'FormaAPI']
