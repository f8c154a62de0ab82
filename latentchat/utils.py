"""
Utilities: logging, per-user paths, legacy keyring lookup, and content
protection for the overlay window.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from typing import Optional

import keyring
from .config import (
    APP_TITLE,
    DEFAULT_LOG_LEVEL,
    HOME_ENV,
    KEYRING_KEY,
    KEYRING_SERVICE,
    LOG_LEVEL_ENV,
)

# -------- logging to EXE folder (or project root in dev) --------
def _resolve_log_dir() -> Path:
    if getattr(sys, "frozen", False) and hasattr(sys, "executable"):
        return Path(sys.executable).parent
    return Path(__file__).resolve().parents[1]

LOG_FILE = str(_resolve_log_dir() / "app.log")

level_name = os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()
level = getattr(logging, level_name, logging.INFO)

logging.basicConfig(
    filename=LOG_FILE,
    level=level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(APP_TITLE)

IS_WINDOWS = sys.platform == "win32"


# -------- per-user application data --------
def app_data_dir() -> Path:
    """Platform-specific directory holding config.json."""
    override = os.getenv(HOME_ENV)
    if override:
        return Path(override)
    if IS_WINDOWS:
        return Path(os.getenv("APPDATA", str(Path.home()))) / APP_TITLE
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_TITLE
    base = os.getenv("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / APP_TITLE


# -------- keyring helpers --------
def get_legacy_api_key() -> Optional[str]:
    """Gemini key stored in the OS keyring by 1.0 builds, if any."""
    try:
        key = keyring.get_password(KEYRING_SERVICE, KEYRING_KEY)
        logger.info("Legacy keyring key: %s", "present" if key else "missing")
        return key
    except Exception as exc:
        logger.error("Keyring read failed: %s", exc, exc_info=True)
        return None


def mask_api_key(api_key: str, visible_chars: int = 4) -> str:
    """``"sk-abcdefghijk"`` -> ``"sk-****hijk"``."""
    if not api_key:
        return ""
    if len(api_key) <= visible_chars:
        return "*" * len(api_key)
    # a prefix only when at least four characters stay hidden between the ends
    prefix = api_key[:3] if len(api_key) >= 3 + visible_chars + 4 else ""
    hidden = len(api_key) - len(prefix) - visible_chars
    return f"{prefix}{'*' * max(hidden, 4)}{api_key[-visible_chars:]}"


# -------- content protection --------
WDA_EXCLUDEFROMCAPTURE = 0x00000011


def protect_window_content(hwnd: int) -> bool:
    """
    Hide the window from screen capture / screen sharing.

    Windows only (10 2004+); other platforms have no equivalent reachable
    from Tk, so this returns False there.
    """
    if not IS_WINDOWS:
        return False

    import ctypes
    from ctypes import wintypes

    user32 = ctypes.WinDLL("user32", use_last_error=True)
    user32.GetAncestor.argtypes = [wintypes.HWND, wintypes.UINT]
    user32.GetAncestor.restype = wintypes.HWND
    user32.SetWindowDisplayAffinity.argtypes = [wintypes.HWND, wintypes.DWORD]
    user32.SetWindowDisplayAffinity.restype = wintypes.BOOL

    # Tk hands out the client hwnd; affinity must be set on the top-level one
    root = user32.GetAncestor(wintypes.HWND(hwnd), 2) or hwnd
    if user32.SetWindowDisplayAffinity(wintypes.HWND(root), WDA_EXCLUDEFROMCAPTURE):
        logger.info("Content protection applied.")
        return True
    logger.error("SetWindowDisplayAffinity failed err=%s", ctypes.get_last_error())
    return False
