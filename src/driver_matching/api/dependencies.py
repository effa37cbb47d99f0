"""FastAPI dependency injection providers."""

from typing import Annotated

from fastapi import Depends, Request

from driver_matching.matching.driver_registry import DriverRegistry
from driver_matching.matching.matching_engine import MatchingEngine
from driver_matching.settings import Settings


def get_driver_registry(request: Request) -> DriverRegistry:
    """Retrieve DriverRegistry from app state."""
    registry: DriverRegistry = request.app.state.driver_registry
    return registry


def get_matching_engine(request: Request) -> MatchingEngine:
    """Retrieve MatchingEngine from app state."""
    engine: MatchingEngine = request.app.state.matching_engine
    return engine


def get_app_settings(request: Request) -> Settings:
    settings: Settings = request.app.state.settings
    return settings


DriverRegistryDep = Annotated[DriverRegistry, Depends(get_driver_registry)]
MatchingEngineDep = Annotated[MatchingEngine, Depends(get_matching_engine)]
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
