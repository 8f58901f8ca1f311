"""Test container builder with selective unmocking."""

from typing import get_args

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider

from yam.util.di import PROVIDERS, Component, get_provider


def build_test_container(unmock: set[Component] | None = None) -> AsyncContainer:
    """Build a container where every mockable component is mocked unless
    named in `unmock`.

    Unmocked components talk to the services configured in the
    environment (`supabase start` for local runs).

    Raises:
        ValueError: If `unmock` names an unknown component

    Examples:
        # Unit tests - in-memory repositories, mock identity provider
        container = build_test_container()

        # Integration tests - real database
        container = build_test_container(unmock={"persistence"})
    """
    unmock = unmock or set()
    unknown = unmock - set(get_args(Component))
    if unknown:
        raise ValueError(f"Unknown components: {unknown}")

    providers = []
    for base in PROVIDERS:
        use_mock = (
            base.__mock_component__ is not None
            and base.__mock_component__ not in unmock
        )
        providers.append(get_provider(base, use_mock=use_mock)())

    # FastapiProvider lets the same container back a test app
    return make_async_container(*providers, FastapiProvider())
