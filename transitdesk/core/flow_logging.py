import logging

from transitdesk.core.config import settings

WORKFLOW = "workflow"
PRICING = "pricing"

# category -> settings switch; unknown categories follow FLOW_LOGS_ENABLED only
_CATEGORY_SWITCHES = {
    WORKFLOW: "FLOW_LOGS_WORKFLOW_ENABLED",
    PRICING: "FLOW_LOGS_PRICING_ENABLED",
}


def _category_enabled(category: str | None) -> bool:
    if not settings.FLOW_LOGS_ENABLED:
        return False
    switch = _CATEGORY_SWITCHES.get(category or "")
    return bool(getattr(settings, switch)) if switch else True


def flow_info(
    logger: logging.Logger,
    msg: str,
    *args,
    category: str | None = None,
    **kwargs,
) -> None:
    """logger.info gated by the FLOW_LOGS_* switches."""
    if _category_enabled(category):
        logger.info(msg, *args, **kwargs)
