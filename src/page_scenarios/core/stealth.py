"""playwright-stealth configuration derived from run settings.

Search engines throttle obvious automation; evasions keep the consent and
captcha interstitials out of scenario runs.
"""
from __future__ import annotations

from typing import Optional

from playwright_stealth import Stealth

from page_scenarios.config.settings import Settings


def stealth_for(settings: Settings) -> Optional[Stealth]:
    """Return the evasions to apply locally, or ``None`` when they are off.

    Remote Hyperbrowser sessions bring their own stealth, so local evasions are
    never layered on top of them.
    """
    if settings.hyperbrowser_enabled or not settings.stealth_enabled:
        return None
    return Stealth(init_scripts_only=settings.stealth_init_scripts_only, **settings.stealth_kwargs())


def describe_stealth(settings: Settings) -> dict[str, object]:
    if settings.hyperbrowser_enabled:
        return {"mode": "hyperbrowser", "enabled": settings.hyperbrowser_use_stealth}
    if not settings.stealth_enabled:
        return {"mode": "local", "enabled": False}
    return {
        "mode": "local",
        "enabled": True,
        "init_scripts_only": settings.stealth_init_scripts_only,
        "overrides": settings.stealth_kwargs(),
    }
