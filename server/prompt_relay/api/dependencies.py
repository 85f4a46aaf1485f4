from fastapi import Request

from prompt_relay.utils.config import RelaySettings


def get_settings(request: Request) -> RelaySettings:
    """Settings pinned on app.state by create_app; loaded once at start-up."""
    return request.app.state.settings
