"""Hook implementations that integrate the Bikram Sambat calendar with Frappe."""
from __future__ import annotations

from .api import conversion, preferences


def boot_session(bootinfo):
    """Inject the resolved preferences and the supported range into the boot payload."""

    context = dict(preferences.get_preference_context())
    context["supported_range"] = conversion.get_supported_range()
    if isinstance(bootinfo, dict):
        bootinfo.setdefault("bikram_sambat", context)
    else:  # ``bootinfo`` is typically a ``frappe._dict``
        setattr(bootinfo, "bikram_sambat", context)
