"""FastAPI dependency injection for optimizer services."""

from typing import Annotated

from fastapi import Depends, Request

from cut_optimizer.application.commands import OptimizeCommand
from cut_optimizer.web.settings import ServerSettings


def get_settings(request: Request) -> ServerSettings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_optimize_command(
    settings: Annotated[ServerSettings, Depends(get_settings)],
) -> OptimizeCommand:
    """Dependency for OptimizeCommand."""
    return OptimizeCommand(max_workers=settings.workers)


# Type aliases for cleaner endpoint signatures
SettingsDep = Annotated[ServerSettings, Depends(get_settings)]
OptimizeCommandDep = Annotated[OptimizeCommand, Depends(get_optimize_command)]
