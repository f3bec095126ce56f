"""ماژول هندلرها"""
from .user_handlers import UserHandler
from .admin_handlers import AdminHandler
from .api_key_handler import ApiKeyHandler
from .callback_handler import CallbackHandler

__all__ = [
    'UserHandler',
    'AdminHandler',
    'ApiKeyHandler',
    'CallbackHandler'
]
