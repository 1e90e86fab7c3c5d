"""Page actions, one per run type."""

import random
from typing import Dict, List, Optional, Type

from browser_runner.core.config.settings import RunnerSettings
from browser_runner.core.enums import RunType
from browser_runner.core.exceptions import ConfigurationError
from browser_runner.services.browser.session import BrowserSessionFactory

from .base import BaseAction
from .company import FindCompanyPeopleAction
from .connect import SendConnectionRequestAction
from .connections import FindConnectionsAction
from .download import DownloadConnectionsAction
from .messaging import GetMessagesAction, SendMessageAction
from .profile import ConnectionStatusAction, RecentPostsAction

ACTION_CLASSES: List[Type[BaseAction]] = [
    FindConnectionsAction,
    SendConnectionRequestAction,
    SendMessageAction,
    FindCompanyPeopleAction,
    DownloadConnectionsAction,
    GetMessagesAction,
    ConnectionStatusAction,
    RecentPostsAction,
]


def build_action_registry(
    session_factory: BrowserSessionFactory,
    settings: Optional[RunnerSettings] = None,
    rng: Optional[random.Random] = None,
) -> Dict[RunType, BaseAction]:
    """
    Instantiate one action per run type.

    Args:
        session_factory: Factory for scoped browser sessions
        settings: Runner settings
        rng: Random source shared by the actions' human timing

    Returns:
        Mapping of run type to action

    Raises:
        ConfigurationError: If a run type has no action or two actions claim one
    """
    registry: Dict[RunType, BaseAction] = {}
    for action_class in ACTION_CLASSES:
        if action_class.run_type in registry:
            raise ConfigurationError(
                f"Duplicate action for run type {action_class.run_type.value}"
            )
        registry[action_class.run_type] = action_class(session_factory, settings, rng)

    missing = [run_type.value for run_type in RunType if run_type not in registry]
    if missing:
        raise ConfigurationError("Run types without an action", details={"missing": missing})
    return registry


__all__ = [
    "ACTION_CLASSES",
    "BaseAction",
    "ConnectionStatusAction",
    "DownloadConnectionsAction",
    "FindCompanyPeopleAction",
    "FindConnectionsAction",
    "GetMessagesAction",
    "RecentPostsAction",
    "SendConnectionRequestAction",
    "SendMessageAction",
    "build_action_registry",
]
