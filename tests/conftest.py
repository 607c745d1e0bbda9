import httpx
import pytest
import pytest_asyncio

from backend.lobby import LobbyStore
from backend.main import create_app
from backend.recipe_service import IngredientExtractor, RecipeService
from snapdish.client import APIClient

BASE_URL = "http://testserver"


class StaticExtractor(IngredientExtractor):
    def __init__(self, names):
        self.names = names
        self.images = []

    def extract(self, image):
        self.images.append(image)
        return list(self.names)


@pytest.fixture
def extractor():
    return StaticExtractor(["Tomato", " basil ", "Mozzarella"])


@pytest.fixture
def app(extractor):
    store = LobbyStore()
    return create_app(store=store, recipe_service=RecipeService(store, extractor=extractor))


@pytest_asyncio.fixture
async def api(app):
    http = httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url=BASE_URL)
    client = APIClient(BASE_URL, http_client=http)
    yield client
    await http.aclose()
