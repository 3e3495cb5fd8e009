"""
Tests for payloads and the multipart form builder.
"""
import pytest

from ml_dispatch.model_client import InvalidInput
from ml_dispatch.model_client.payload import ImagePayload, TextPayload, build_form
from ml_dispatch.model_client.schemas import MachineLearningRequest, ModelSpec, ModelTask, ModelType

REQUEST = MachineLearningRequest({ModelTask.SEARCH: {ModelType.VISUAL: ModelSpec(model_name="m")}})


async def test_image_form(image_file):
    form = await build_form(ImagePayload(image_file), REQUEST)
    assert form["entries"] == (None, '{"clip":{"visual":{"modelName":"m"}}}')
    assert form["image"] == ("blob", b"\xff\xd8\xff\xe0fake-jpeg-bytes", "application/octet-stream")
    assert "text" not in form


async def test_text_form():
    form = await build_form(TextPayload("hello world"), REQUEST)
    assert form["text"] == (None, "hello world")
    assert "image" not in form


async def test_empty_text_is_still_text():
    form = await build_form(TextPayload(""), REQUEST)
    assert form["text"] == (None, "")


@pytest.mark.parametrize("payload", [None, {"text": "dict is not a payload"}, ImagePayload(""), TextPayload(None)])
async def test_invalid_payloads(payload):
    with pytest.raises(InvalidInput) as exc_info:
        await build_form(payload, REQUEST)
    assert exc_info.value.payload == payload
