from __future__ import annotations

from unigen_providers.base.models import ImageSettings, Message, Role
from unigen_providers.base.utils.images import format_image_markdown
from unigen_providers.gemini.contents import build_gemini_contents
from unigen_providers.gemini.shared import build_generation_config, looks_like_image_output_model

DATA = "iVBORw0KGgo" + "D" * 70
URL = f"data:image/png;base64,{DATA}"


def test_text_only_history_and_new_turn():
    history = [Message(id="1", role=Role.USER, text="hi"), Message(id="2", role=Role.MODEL, text="hello")]
    assert build_gemini_contents(history, "more", []) == [  # nosec B101
        {"role": "user", "parts": [{"text": "hi"}]},
        {"role": "model", "parts": [{"text": "hello"}]},
        {"role": "user", "parts": [{"text": "more"}]},
    ]


def test_model_turn_echoes_signature_on_every_part():
    reply = Message(id="2", role=Role.MODEL, text="Here:\n\n" + format_image_markdown(URL, "c2lnbmF0dXJl"))
    contents = build_gemini_contents([reply], "", [])
    assert contents[0]["parts"] == [  # nosec B101
        {"text": "Here:", "thoughtSignature": "c2lnbmF0dXJl"},
        {"inlineData": {"mimeType": "image/png", "data": DATA}, "thoughtSignature": "c2lnbmF0dXJl"},
    ]
    # an empty new turn still carries one part
    assert contents[-1] == {"role": "user", "parts": [{"text": ""}]}  # nosec B101


def test_user_signatures_are_not_echoed_and_remote_images_skipped():
    turn = Message(id="1", role=Role.USER, text=format_image_markdown(URL, "sig"), images=["https://x/y.png"])
    parts = build_gemini_contents([turn], "q", [])[0]["parts"]
    assert parts == [{"inlineData": {"mimeType": "image/png", "data": DATA}}]  # nosec B101


def test_new_turn_images():
    contents = build_gemini_contents([], "describe", [URL, ""])
    assert contents[-1]["parts"][1]["inlineData"]["data"] == DATA  # nosec B101


def test_image_model_generation_config():
    assert looks_like_image_output_model("gemini-2.5-flash-image-preview")  # nosec B101
    assert not looks_like_image_output_model("gemini-pro-vision-image")  # nosec B101
    assert build_generation_config("gemini-2.5-flash", None) is None  # nosec B101
    assert build_generation_config("gemini-3-pro-image", None) == {"responseModalities": ["TEXT", "IMAGE"]}  # nosec B101
    cfg = build_generation_config("gemini-3-pro-image", ImageSettings(enabled=True, resolution="4K", aspect_ratio="auto"))
    assert cfg["imageConfig"] == {"imageSize": "4K"}  # nosec B101
    cfg = build_generation_config("gemini-3-pro-image", ImageSettings(enabled=True, aspect_ratio="9:16"))
    assert cfg["imageConfig"] == {"imageSize": "1K", "aspectRatio": "9:16"}  # nosec B101
    disabled = build_generation_config("gemini-3-pro-image", ImageSettings(enabled=False, resolution="2K"))
    assert "imageConfig" not in disabled  # nosec B101
