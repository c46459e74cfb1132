"""Elevation check for the current process."""

import os
import platform


def is_elevated() -> bool:
    """Return True if the process holds administrator rights.

    Asked fresh on every call. Any failure to answer counts as not
    elevated.
    """
    if platform.system() == "Windows":
        try:
            import ctypes
            return ctypes.windll.shell32.IsUserAnAdmin() != 0
        except (AttributeError, OSError):
            return False
    return hasattr(os, "geteuid") and os.geteuid() == 0
