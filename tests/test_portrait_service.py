"""Unit tests for PortraitService."""

import base64
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from studio_api.core.errors import LLMAppError, ValidationAppError
from studio_api.schemas.portrait import PortraitRequest
from studio_api.services.portrait_service import (
    SUBSCRIBER_SOURCE,
    VISION_PROMPT,
    PortraitService,
    build_portrait_prompt,
)


@pytest.fixture
def mock_llm() -> MagicMock:
    llm = MagicMock()
    llm.describe_image = AsyncMock(return_value="A ginger tabby cat with green eyes.")
    llm.generate_image = AsyncMock(return_value="https://images.example.com/portrait.png")
    return llm


@pytest.fixture
def mock_mailing_list() -> MagicMock:
    client = MagicMock()
    client.subscribe = AsyncMock(return_value=None)
    return client


class TestValidateRequest:
    def test_accepts_bare_base64_and_wraps_as_data_url(self, mock_llm, jpeg_base64: str) -> None:
        service = PortraitService(llm=mock_llm)

        email, image_url = service.validate_request(
            PortraitRequest(email=" Owner@Example.com ", pet_image_base64=jpeg_base64)
        )

        assert email == "Owner@Example.com"
        assert image_url == f"data:image/jpeg;base64,{jpeg_base64}"

    def test_accepts_data_url(self, mock_llm, png_data_url: str) -> None:
        service = PortraitService(llm=mock_llm)

        _, image_url = service.validate_request(
            PortraitRequest(email="a@example.com", pet_image_base64=png_data_url)
        )

        assert image_url == png_data_url

    def test_accepts_line_wrapped_bare_base64(self, jpeg_base64: str) -> None:
        wrapped = base64.encodebytes(base64.b64decode(jpeg_base64) * 4).decode()

        _, image_url = PortraitService.validate_request(
            PortraitRequest(email="a@example.com", pet_image_base64=wrapped)
        )

        assert image_url.startswith("data:image/jpeg;base64,")
        assert "\n" not in image_url

    def test_remote_url_skips_payload_checks(self) -> None:
        validated = PortraitService.validate_request(
            PortraitRequest(email="a@example.com", pet_image_base64=" https://cdn.example.com/pug.webp ")
        )

        assert validated.email == "a@example.com"
        assert validated.image_url == "https://cdn.example.com/pug.webp"

    @pytest.mark.parametrize("email", [None, "", "   ", "not-an-email"])
    def test_rejects_invalid_email(self, mock_llm, jpeg_base64: str, email) -> None:
        service = PortraitService(llm=mock_llm)

        with pytest.raises(ValidationAppError) as exc_info:
            service.validate_request(PortraitRequest(email=email, pet_image_base64=jpeg_base64))

        assert exc_info.value.code == "invalid_email"
        assert exc_info.value.message == "Valid email is required"

    def test_rejects_missing_image(self, mock_llm) -> None:
        service = PortraitService(llm=mock_llm)

        with pytest.raises(ValidationAppError) as exc_info:
            service.validate_request(PortraitRequest(email="a@example.com"))

        assert exc_info.value.code == "missing_image"

    def test_rejects_non_base64(self, mock_llm) -> None:
        service = PortraitService(llm=mock_llm)

        with pytest.raises(ValidationAppError) as exc_info:
            service.validate_request(
                PortraitRequest(email="a@example.com", pet_image_base64="not base64 at all!")
            )

        assert exc_info.value.code == "invalid_image"

    def test_rejects_non_image_content(self, mock_llm) -> None:
        service = PortraitService(llm=mock_llm)
        payload = base64.b64encode(b"%PDF-1.4 definitely not a photo").decode()

        with pytest.raises(ValidationAppError) as exc_info:
            service.validate_request(PortraitRequest(email="a@example.com", pet_image_base64=payload))

        assert exc_info.value.code == "invalid_image"

    @patch("studio_api.services.portrait_service.settings")
    def test_rejects_oversized_image(self, mock_settings, mock_llm) -> None:
        mock_settings.app.max_image_size_mb = 1
        service = PortraitService(llm=mock_llm)
        payload = base64.b64encode(b"\xff\xd8\xff" + b"\x00" * (1024 * 1024 + 10)).decode()

        with pytest.raises(ValidationAppError) as exc_info:
            service.validate_request(PortraitRequest(email="a@example.com", pet_image_base64=payload))

        assert exc_info.value.code == "image_too_large"


class TestGenerate:
    @pytest.mark.asyncio
    async def test_runs_vision_then_image_then_signup(self, mock_llm, mock_mailing_list) -> None:
        service = PortraitService(llm=mock_llm, mailing_list=mock_mailing_list)

        result = await service.generate(email="Owner@Example.com", image_url="data:image/jpeg;base64,AAAA")

        mock_llm.describe_image.assert_awaited_once_with("data:image/jpeg;base64,AAAA", VISION_PROMPT)
        prompt = mock_llm.generate_image.await_args.args[0]
        assert "A ginger tabby cat with green eyes." in prompt
        mock_mailing_list.subscribe.assert_awaited_once_with(
            "Owner@Example.com", source=SUBSCRIBER_SOURCE
        )

        assert result.success is True
        assert result.image_url == "https://images.example.com/portrait.png"
        assert result.pet_description == "A ginger tabby cat with green eyes."
        assert result.email == "Owner@Example.com"

    @pytest.mark.asyncio
    async def test_mailing_list_failure_is_not_fatal(self, mock_llm, mock_mailing_list) -> None:
        mock_mailing_list.subscribe = AsyncMock(side_effect=httpx.ConnectError("boom"))
        service = PortraitService(llm=mock_llm, mailing_list=mock_mailing_list)

        result = await service.generate(email="a@example.com", image_url="data:image/jpeg;base64,AAAA")

        assert result.image_url == "https://images.example.com/portrait.png"

    @pytest.mark.asyncio
    async def test_unexpected_mailing_list_error_is_not_fatal(self, mock_llm, mock_mailing_list) -> None:
        mock_mailing_list.subscribe = AsyncMock(side_effect=RuntimeError("bad payload"))
        service = PortraitService(llm=mock_llm, mailing_list=mock_mailing_list)

        result = await service.generate(email="a@example.com", image_url="data:image/jpeg;base64,AAAA")

        assert result.success is True

    @pytest.mark.asyncio
    async def test_without_mailing_list_skips_signup(self, mock_llm) -> None:
        service = PortraitService(llm=mock_llm, mailing_list=None)

        result = await service.generate(email="a@example.com", image_url="data:image/jpeg;base64,AAAA")

        assert result.success is True

    @pytest.mark.asyncio
    async def test_vision_failure_stops_pipeline(self, mock_llm, mock_mailing_list) -> None:
        mock_llm.describe_image = AsyncMock(
            side_effect=LLMAppError(code="vision_failed", message="Failed to analyze pet image: x")
        )
        service = PortraitService(llm=mock_llm, mailing_list=mock_mailing_list)

        with pytest.raises(LLMAppError):
            await service.generate(email="a@example.com", image_url="data:image/jpeg;base64,AAAA")

        mock_llm.generate_image.assert_not_awaited()
        mock_mailing_list.subscribe.assert_not_awaited()


def test_portrait_prompt_embeds_description_and_style() -> None:
    prompt = build_portrait_prompt("A black pug with a curly tail")

    assert prompt.startswith(
        "Create a Renaissance-era pet portrait based on this description: A black pug with a curly tail"
    )
    assert "epaulettes" in prompt
    assert "Do NOT alter the pet's species" in prompt
