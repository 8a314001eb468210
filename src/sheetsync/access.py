from pathlib import Path
import json
import logging

import google.auth
import google.auth.exceptions
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google.oauth2 import service_account
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build, Resource

logger = logging.getLogger(__name__)

class _SheetsAccess():
    """
    Authenticated access to the Google Sheets API.

    Credentials are looked for in this order:
        1. the local token cache from a previous OAuth session (refreshed if stale)
        2. a service account key file, if one is configured
        3. the OAuth installed-app flow from a client secrets file, which opens
           the consent screen once and then caches the token
        4. application default credentials (GOOGLE_APPLICATION_CREDENTIALS etc)

    There is no point having more than one authenticated session per process
    so this is a module singleton, `gws`, and the store just asks it for the
    service.
    """

    SCOPES = {
        "sheets": "https://www.googleapis.com/auth/spreadsheets",
        "sheets-ro": "https://www.googleapis.com/auth/spreadsheets.readonly",
        "drive-file": "https://www.googleapis.com/auth/drive.file",
    }
    _SCOPE_URL_PREFIX = "https://www.googleapis.com/"

    _DEFAULT_SECRETS = Path.home() / "sheetsync_client_secrets.json"
    _DEFAULT_CACHE = Path.home() / "sheetsync_tokens.json"

    def __init__(self) -> None:
        self.reset()

    def __bool__(self) -> bool:
        return self.connected

    def __str__(self) -> str:
        if self.connected:
            return f"Connected:{str(self.scopes)}"
        return f"Disconnected:{str(self.scopes)}"

    def __repr__(self) -> str:
        return f"{str(self.__class__)}:{str(self)}"

    @classmethod
    def get_scope(cls, scope: str) -> str:
        """
        Get a scope based on simplified label.
        A raw URL will also be accepted.
        """
        s = str(scope)
        sc = cls.SCOPES.get(s, "")
        if not sc and s.startswith(cls._SCOPE_URL_PREFIX):
            sc = s
        return sc

    def reset(self) -> None:
        """Reset all connection state to defaults"""
        self.secrets = self._DEFAULT_SECRETS
        self.cache = self._DEFAULT_CACHE
        self.service_account_file: Path|None = None
        self.scopes = [self.SCOPES["sheets"]]
        self.auth_server = 'localhost'
        self.auth_port = 0
        self._creds = None
        self._services = {}

    @property
    def connected(self) -> bool:
        return bool(self._creds) and bool(self._creds.valid)

    @property
    def creds(self):
        return self._creds

    @property
    def config(self) -> dict:
        """
        All configuration state as a dict, for pushing into a json file.
        """
        return {
            'secrets': str(self.secrets),
            'cache': str(self.cache),
            'service_account': str(self.service_account_file) if self.service_account_file else None,
            'scopes': list(self.scopes),
            'server': self.auth_server,
            'port': self.auth_port
        }

    @config.setter
    def config(self, config: dict) -> None:
        """
        Set configuration state from a dict, as pulled from a config file.
        Anything that changes which credentials apply drops the session.
        """
        reconnect = False
        v = config.get('port', None)
        if v is not None:
            self.auth_port = int(v)
        v = config.get('server', None)
        if v is not None:
            self.auth_server = str(v)
        v = config.get('scopes', [])
        if v:
            scopes = [self.get_scope(s) for s in ([v] if isinstance(v, str) else v)]
            self.scopes = [s for s in scopes if s]
            reconnect = True
        v = config.get('cache', None)
        if v is not None:
            self.cache = Path(v)
            reconnect = True
        v = config.get('secrets', None)
        if v is not None:
            self.secrets = Path(v)
            reconnect = True
        v = config.get('service_account', None)
        if v is not None:
            self.service_account_file = Path(v)
            reconnect = True
        if reconnect:
            self._creds = None
            self._services = {}

    def _from_cache(self):
        if not (self.cache.exists() and self.cache.is_file()):
            return None
        with open(self.cache.resolve(), 'r', encoding='utf-8') as f:
            j = json.load(f)
        # a cache made for fewer scopes is no use, the refresh wont add them
        if not all(s in j.get('scopes', []) for s in self.scopes):
            logger.info("cached token does not cover %s, discarding", self.scopes)
            self.cache.unlink()
            return None
        creds = Credentials.from_authorized_user_info(j, self.scopes)
        if not creds.valid and creds.refresh_token:
            try:
                creds.refresh(Request())
            except google.auth.exceptions.RefreshError as e:
                logger.warning("failed to refresh stored creds: %s, deleting cred cache", e)
                self.cache.unlink()
                return None
        return creds

    def _save_cache(self) -> None:
        user_info = {'refresh_token': self._creds.refresh_token, 'client_id': self._creds.client_id,
                     'client_secret': self._creds.client_secret, 'scopes': list(self.scopes)}
        with open(self.cache.resolve(), 'w', encoding='utf-8') as f:
            json.dump(user_info, f, ensure_ascii=False, indent=2)

    def connect(self) -> bool:
        """
        Establish a new authentication session.
        If an OAuth flow was needed the token is cached for next time.
        """
        self._creds = None
        self._services = {}
        self._creds = self._from_cache()
        if not self.connected and self.service_account_file is not None:
            if self.service_account_file.is_file():
                self._creds = service_account.Credentials.from_service_account_file(
                    str(self.service_account_file), scopes=self.scopes)
                # service account tokens are minted on first request
                self._creds.refresh(Request())
            else:
                logger.warning("service account file %s not found", self.service_account_file)
        if not self.connected and self.secrets.exists() and self.secrets.is_file():
            flow = InstalledAppFlow.from_client_secrets_file(str(self.secrets), self.scopes)
            self._creds = flow.run_local_server(host=self.auth_server, port=self.auth_port)
            if self.connected:
                self._save_cache()
        if not self.connected:
            try:
                self._creds, _ = google.auth.default(scopes=self.scopes)
                if not self._creds.valid:
                    self._creds.refresh(Request())
            except google.auth.exceptions.DefaultCredentialsError:
                logger.error("no usable Google credentials found")
                self._creds = None
        return self.connected

    def get_service(self, name: str = "sheets", version: str = "v4") -> Resource|None:
        """
        Build the requested service if not already available, connecting if required.
        Can return None if no connection could be made.
        """
        if not self.connected and not self.connect():
            return None
        key = f'{name}:{version}'
        s = self._services.get(key, None)
        if s is None:
            s = build(name, version, credentials=self._creds, cache_discovery=False)
            self._services[key] = s
        return s

gws = _SheetsAccess()
