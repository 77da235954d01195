# GophKeeper Services
from gophkeeper.services.auth import Authorizer
from gophkeeper.services.crypto import Cipher
from gophkeeper.services.secrets import SecretProvider
from gophkeeper.services.storage import SecretStorage, UserStorage
from gophkeeper.services.users import UserSessionProvider

__all__ = [
    "Authorizer",
    "Cipher",
    "SecretProvider",
    "SecretStorage",
    "UserSessionProvider",
    "UserStorage",
]
