"""Media control and preview unit tests"""

import asyncio
from unittest.mock import Mock, patch

import pytest
import requests

from spider_boxes.enums import MediaState
from spider_boxes.errors import NotFoundError, SpiderBoxesException
from spider_boxes.renderer import (
    DynamicFieldRenderer,
    HttpMediaResolver,
    MediaInfo,
    MediaPreview,
    StaticMediaResolver,
)
from spider_boxes.schema import FieldDescriptor

ITEMS = {
    "1": {"url": "https://cdn.example.com/a.png", "filename": "a.png", "mime_type": "image/png"},
    "2": {"url": "https://cdn.example.com/b.pdf", "filename": "b.pdf", "mime_type": "application/pdf"},
}


def gallery(**kwargs):
    return FieldDescriptor(id="gallery", kind="media", title="Gallery", multiple=True, **kwargs)


def test_static_resolver_resolves_and_raises_not_found():
    resolver = StaticMediaResolver(ITEMS)

    info = asyncio.run(resolver.resolve("1"))

    assert info == MediaInfo(id="1", **ITEMS["1"])
    with pytest.raises(NotFoundError):
        asyncio.run(resolver.resolve("404"))


def test_preview_marks_each_slot_independently():
    preview = MediaPreview(StaticMediaResolver(ITEMS))

    slots = asyncio.run(preview.load([1, "missing", 2]))

    assert [slot.state for slot in slots] == [
        MediaState.READY,
        MediaState.NOT_FOUND,
        MediaState.READY,
    ]
    assert preview.slot("2").info.filename == "b.pdf"


def test_preview_resolves_only_unknown_ids():
    resolver = Mock()

    async def resolve(media_id):
        return MediaInfo(id=media_id, url=f"https://cdn.example.com/{media_id}")

    resolver.resolve = Mock(side_effect=resolve)
    preview = MediaPreview(resolver)

    asyncio.run(preview.load(["1", "2"]))
    asyncio.run(preview.load(["2", "3"]))

    assert [call.args[0] for call in resolver.resolve.call_args_list] == ["1", "2", "3"]


def test_preview_failure_becomes_not_found():
    resolver = Mock()

    async def resolve(media_id):
        raise RuntimeError("network down")

    resolver.resolve = Mock(side_effect=resolve)
    preview = MediaPreview(resolver)

    slots = asyncio.run(preview.load(["1"]))

    assert slots[0].state == MediaState.NOT_FOUND


def test_render_does_not_wait_for_unknown_ids():
    renderer = DynamicFieldRenderer(media_resolver=StaticMediaResolver(ITEMS))
    asyncio.run(renderer.load_media(["1"]))

    rendered = renderer.render(gallery(), [1, 2])

    media = rendered.attributes["media"]
    assert media[0]["state"] == "ready"
    assert media[0]["info"]["url"] == ITEMS["1"]["url"]
    assert media[1]["state"] == "loading"


def test_media_validate_rejects_not_found_ids():
    renderer = DynamicFieldRenderer(media_resolver=StaticMediaResolver(ITEMS))
    asyncio.run(renderer.load_media(["1", "9"]))

    assert renderer.validate(gallery(), [1]).valid is True
    assert renderer.validate(gallery(), [1, 9]).message == "Invalid media file"


def test_media_sanitize():
    renderer = DynamicFieldRenderer()
    single = FieldDescriptor(id="logo", kind="media")

    assert renderer.sanitize(gallery(), ["3", "", None, "abc"]) == [3, "abc"]
    assert renderer.sanitize(single, ["7", "8"]) == 7
    assert renderer.sanitize(single, None) == ""
    assert renderer.validate(single, [1, 2]).valid is False


def test_media_sanitize_keeps_non_decimal_digits_as_text():
    renderer = DynamicFieldRenderer()
    single = FieldDescriptor(id="logo", kind="media")

    assert renderer.sanitize(single, "²") == "²"
    assert renderer.sanitize(gallery(), ["12", "³"]) == [12, "³"]


def test_load_media_without_resolver_is_a_no_op():
    assert asyncio.run(DynamicFieldRenderer().load_media(["1"])) == []


def test_http_resolver_fetches_metadata():
    response = Mock(status_code=200)
    response.json.return_value = {"id": 5, "url": "https://cdn.example.com/files/photo.jpg"}

    with patch("spider_boxes.renderer.media.requests.get", return_value=response) as get:
        info = asyncio.run(HttpMediaResolver("https://media.example.com/api/", timeout=3).resolve("5"))

    get.assert_called_once_with("https://media.example.com/api/5", timeout=3)
    assert info.id == "5"
    assert info.filename == "photo.jpg"


def test_http_resolver_maps_404_to_not_found():
    with patch("spider_boxes.renderer.media.requests.get", return_value=Mock(status_code=404)):
        with pytest.raises(NotFoundError):
            HttpMediaResolver("https://media.example.com").fetch("5")


def test_http_resolver_wraps_request_errors():
    with patch(
        "spider_boxes.renderer.media.requests.get",
        side_effect=requests.ConnectionError("refused"),
    ):
        with pytest.raises(SpiderBoxesException):
            HttpMediaResolver("https://media.example.com").fetch("5")


def test_http_resolver_rejects_invalid_base_url():
    with pytest.raises(SpiderBoxesException):
        HttpMediaResolver("not-a-url")
