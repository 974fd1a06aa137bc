"""
CLI Context for managing command dependencies.

Holds the settings and credential overrides collected from the command line
so commands can build stores without touching global state.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import httpx

from .settings import Settings, create_settings_from_env
from .store import Store, get_deploy_store, get_store


@dataclass
class CLIContext:
    """
    Shared context for CLI commands.

    Credentials left as None fall back to the context resolver
    (NETLIFY_BLOBS_CONTEXT, then the process-global slot).
    """
    settings: Settings
    site_id: Optional[str] = None
    token: Optional[str] = None
    edge_url: Optional[str] = None
    client: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_env(
        cls,
        *,
        site_id: Optional[str] = None,
        token: Optional[str] = None,
        edge_url: Optional[str] = None,
    ) -> CLIContext:
        """
        Create CLI context with settings loaded from environment variables.

        Returns:
            CLIContext carrying the given credential overrides
        """
        return cls(settings=create_settings_from_env(), site_id=site_id, token=token, edge_url=edge_url)

    def store(self, name: str, *, deploy_id: Optional[str] = None) -> Store:
        """
        Build a store for one command.

        With `deploy_id`, `name` selects a named store of that deploy.
        """
        options = dict(
            site_id=self.site_id,
            token=self.token,
            edge_url=self.edge_url,
            client=self.client,
            settings=self.settings,
        )
        if deploy_id:
            return get_deploy_store(name, deploy_id=deploy_id, **options)
        return get_store(name, **options)
