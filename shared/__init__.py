"""
Shared modules for the PreCalc tutor services.
"""

from .models import *
from .config import get_settings
from .llm_client import get_llm_client
