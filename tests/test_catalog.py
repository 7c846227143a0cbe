"""Tests for the catalog repository and catalog endpoints."""

import json

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from salestrainer.models import AppSetting
from salestrainer.services.catalog import PRODUCTS_KEY, CatalogRepository
from tests.factories import SAMPLE_PRODUCTS


@pytest.fixture
def repository(tmp_path) -> CatalogRepository:
    return CatalogRepository(tmp_path / "products.json", sample_size=12)


class TestCatalogRepository:
    @pytest.mark.asyncio
    async def test_load_returns_none_before_upload(
        self, repository: CatalogRepository, db_session: AsyncSession
    ):
        assert await repository.load(db_session) is None

    @pytest.mark.asyncio
    async def test_replace_persists_row_and_mirror(
        self, repository: CatalogRepository, db_session: AsyncSession
    ):
        count = await repository.replace(db_session, SAMPLE_PRODUCTS)

        assert count == 3
        row = await db_session.get(AppSetting, PRODUCTS_KEY)
        assert json.loads(row.value) == SAMPLE_PRODUCTS
        assert json.loads(repository.seed_path.read_text()) == SAMPLE_PRODUCTS

    @pytest.mark.asyncio
    async def test_replace_refreshes_snapshot(
        self, repository: CatalogRepository, db_session: AsyncSession
    ):
        await repository.replace(db_session, SAMPLE_PRODUCTS)
        assert len(await repository.load(db_session)) == 3

        await repository.replace(db_session, [{"sku": "ONLY"}])

        assert await repository.load(db_session) == [{"sku": "ONLY"}]

    @pytest.mark.asyncio
    async def test_load_falls_back_to_seed_file(
        self, repository: CatalogRepository, db_session: AsyncSession
    ):
        repository.seed_path.write_text(json.dumps(SAMPLE_PRODUCTS))

        assert await repository.load(db_session) == SAMPLE_PRODUCTS

    @pytest.mark.asyncio
    async def test_load_ignores_non_list_payload(
        self, repository: CatalogRepository, db_session: AsyncSession
    ):
        db_session.add(AppSetting(key=PRODUCTS_KEY, value='{"not": "a list"}'))
        await db_session.commit()

        assert await repository.load(db_session) is None

    def test_sample_caps_to_prefix(self, repository: CatalogRepository):
        products = [{"sku": f"SKU-{i}"} for i in range(30)]

        sample = repository.sample(products)

        assert len(sample) == 12
        assert sample == products[:12]


class TestCatalogEndpoints:
    @pytest.mark.asyncio
    async def test_fetch_before_upload_returns_null(self, client: AsyncClient):
        response = await client.get("/api/products")

        assert response.status_code == 200
        assert response.json() == {"products": None}

    @pytest.mark.asyncio
    async def test_upload_then_fetch(self, client: AsyncClient):
        response = await client.post("/api/products", json={"products": SAMPLE_PRODUCTS})

        assert response.status_code == 200
        assert response.json() == {"ok": True, "count": 3}

        fetched = await client.get("/api/products")
        assert fetched.json()["products"] == SAMPLE_PRODUCTS

    @pytest.mark.asyncio
    async def test_upload_requires_products_field(self, client: AsyncClient):
        response = await client.post("/api/products", json={})

        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"
