from __future__ import annotations

from unigen_providers.base.models import (
    GenerationExtras,
    GenerationRequest,
    ImageRef,
    ImageSettings,
    Message,
    Role,
)
from unigen_providers.base.utils.images import format_image_markdown

URL = "data:image/png;base64,iVBORw0KGgo" + "C" * 80


def test_message_coerces_role_and_images():
    msg = Message(id="1", role="user", text=None, images=[URL, "", ImageRef(url="https://x/y.png")])  # type: ignore[arg-type]
    assert msg.role is Role.USER  # nosec B101
    assert msg.text == ""  # nosec B101
    assert [img.url for img in msg.images] == [URL, "https://x/y.png"]  # nosec B101
    assert msg.images[0].base64_data and msg.images[1].base64_data is None  # nosec B101


def test_all_images_merges_explicit_and_inline_signatures():
    msg = Message(id="2", role=Role.MODEL, text=format_image_markdown(URL, "sig-1"), images=[URL])
    images = msg.all_images()
    assert len(images) == 1  # nosec B101
    assert images[0].signature == "sig-1"  # nosec B101
    assert msg.resolved_signature() == "sig-1"  # nosec B101


def test_own_signature_wins():
    msg = Message(id="3", role=Role.MODEL, text=format_image_markdown(URL, "img"), signature="own")
    assert msg.resolved_signature() == "own"  # nosec B101


def test_extras_accept_camel_case_settings():
    extras = GenerationExtras.model_validate(
        {
            "enterpriseEnabled": True,
            "enterpriseProjectId": "proj",
            "enterpriseToken": "ya29.token",
            "imageSettings": {"enabled": True, "resolution": "2K", "aspectRatio": "16:9"},
        }
    )
    assert extras.enterprise_enabled and extras.enterprise_project_id == "proj"  # nosec B101
    assert extras.enterprise_location == "us-central1"  # nosec B101
    assert extras.image_settings == ImageSettings(enabled=True, resolution="2K", aspect_ratio="16:9")  # nosec B101
    assert "ya29" not in repr(extras)  # nosec B101


def test_request_image_detection_is_user_only():
    model_turn = Message(id="m", role=Role.MODEL, text=format_image_markdown(URL))
    req = GenerationRequest(model="m", history=[model_turn], text="hi")
    assert not req.has_any_images()  # nosec B101
    assert req.has_any_images(user_only=False)  # nosec B101
    assert GenerationRequest(model="m", history=[], text="", images=[URL]).has_any_images()  # nosec B101
    assert not GenerationRequest(model="m", history=[], text="", images=[""]).has_any_images()  # nosec B101
