from __future__ import annotations

from google.auth.exceptions import GoogleAuthError
from gspread.exceptions import GSpreadException
from requests import RequestException

# Failures raised by the spreadsheet client stack (API, auth, transport).
GATEWAY_ERRORS = (GSpreadException, GoogleAuthError, RequestException)
