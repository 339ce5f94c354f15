import base64
import io

import pytest
from PIL import Image

from vinscan.core.adapter import VehicleAIAdapter
from vinscan.llm.provider_config import AdapterConfig

from stub_oracle import StubOracle


@pytest.fixture
def config():
    return AdapterConfig(api_key="test-key", flash_model="flash-test", pro_model="pro-test")


@pytest.fixture
def make_adapter(config):
    def factory(text=""):
        oracle = StubOracle(text)
        return VehicleAIAdapter(config, oracle=oracle), oracle
    return factory


@pytest.fixture
def png_bytes():
    buffer = io.BytesIO()
    Image.new("RGB", (4, 4), color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def png_data_uri(png_bytes):
    return "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")
