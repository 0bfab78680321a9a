"""Tests for the MailerLite subscriber client."""

import json

import httpx
import pytest
import respx

from studio_api.adapters.mailing_list import MailerLiteClient, create_mailing_list_client
from studio_api.core.config import MailingListSettings


@pytest.mark.asyncio
@respx.mock
async def test_subscribe_posts_email_group_and_source() -> None:
    route = respx.post("https://mailerlite.test/api/subscribers").mock(
        return_value=httpx.Response(201, json={"data": {"id": "1"}})
    )
    client = MailerLiteClient("ml-token", group_id="42", base_url="https://mailerlite.test/")

    await client.subscribe("Owner@Example.com", source="Renaissance Pet Portrait Generator")

    assert route.call_count == 1
    request = route.calls.last.request
    assert request.headers["Authorization"] == "Bearer ml-token"
    assert request.headers["Accept"] == "application/json"
    assert json.loads(request.content) == {
        "email": "Owner@Example.com",
        "groups": ["42"],
        "fields": {"source": "Renaissance Pet Portrait Generator"},
    }


@pytest.mark.asyncio
@respx.mock
async def test_subscribe_raises_on_error_status() -> None:
    respx.post("https://connect.mailerlite.com/api/subscribers").mock(
        return_value=httpx.Response(422, json={"message": "invalid"})
    )
    client = MailerLiteClient("ml-token", group_id="42")

    with pytest.raises(httpx.HTTPStatusError):
        await client.subscribe("bad@example.com", source="test")


@pytest.mark.asyncio
@respx.mock
async def test_subscribe_propagates_transport_errors() -> None:
    respx.post("https://connect.mailerlite.com/api/subscribers").mock(side_effect=httpx.ConnectTimeout)
    client = MailerLiteClient("ml-token", group_id="42")

    with pytest.raises(httpx.TransportError):
        await client.subscribe("a@example.com", source="test")


def test_factory_returns_none_without_api_key() -> None:
    assert create_mailing_list_client(MailingListSettings(api_key=None)) is None


def test_factory_builds_client_from_settings() -> None:
    client = create_mailing_list_client(
        MailingListSettings(api_key="ml-token", group_id="7", timeout_seconds=5.0)
    )

    assert isinstance(client, MailerLiteClient)
    assert client.group_id == "7"
    assert client.timeout_seconds == 5.0
