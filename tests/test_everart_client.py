from imageproxy.everart_client import DEFAULT_MODEL_ID, EverArtClient, build_generation_payload


def test_payload_has_fixed_generation_parameters():
    assert build_generation_payload("a red fox") == {
        "prompt": "a red fox",
        "image_count": 1,
        "type": "txt2img",
        "height": 1024,
        "width": 1024,
        "response_format": "url",
    }


def test_urls_strip_trailing_slash():
    client = EverArtClient(http=None, base_url="https://api.everart.ai/")
    assert client.generations_url() == f"https://api.everart.ai/v1/models/{DEFAULT_MODEL_ID}/generations"
    assert client.generation_url("g1") == "https://api.everart.ai/v1/generations/g1"
