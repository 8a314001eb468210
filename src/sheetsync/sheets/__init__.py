"""
Google Sheets backend for the table store.
"""

# can address up to 'ZZZ'
GoogleSheetsMaxColumns = 18278

from .a1 import GoogleSheetsA1Notation
from .resources import *
from .requests import *
from .store import GoogleSheetsTableStore
