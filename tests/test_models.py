"""내장 모델 CRUD 테스트.

Embedded model tests — Add, read, edit and delete sneaker models inside a
brand, including per-brand case-insensitive name uniqueness.
"""

from pathlib import Path

from bson import ObjectId
from httpx import AsyncClient
from pymongo.database import Database

from app.services.brand_service import brand_service
from tests.conftest import AJAX, brand_form, image_file, model_form


def _url(brand, suffix: str = "") -> str:
    return f"/brand/{brand['_id']}/model{suffix}"


class TestModelCreate:
    """모델 추가 테스트."""

    async def test_create_model_ajax(self, client: AsyncClient, db: Database, brand):
        """AJAX 추가 성공 — 201, brandId/modelId/model."""
        res = await client.post(_url(brand, "/new"), data=model_form(), headers=AJAX)
        assert res.status_code == 201
        data = res.json()
        assert data["success"] is True
        assert data["brandId"] == str(brand["_id"])
        assert data["model"]["name"] == "Air Max 90"
        assert data["model"]["price"] == 149.99

        stored = db.brands.find_one({"_id": brand["_id"]})["models"]
        assert len(stored) == 1
        assert isinstance(stored[0]["_id"], ObjectId)
        assert str(stored[0]["_id"]) == data["modelId"]

    async def test_create_model_redirects(self, client: AsyncClient, brand):
        res = await client.post(_url(brand, "/new"), data=model_form())
        assert res.status_code == 303
        assert res.headers["location"] == f"/brand/{brand['_id']}"

    async def test_rating_defaults_to_zero(self, client: AsyncClient, brand):
        res = await client.post(
            _url(brand, "/new"), data=model_form(average_rating=""), headers=AJAX
        )
        assert res.status_code == 201
        assert res.json()["model"]["average_rating"] == 0

    async def test_duplicate_name_case_insensitive(self, client: AsyncClient, db: Database, brand, sneaker):
        """같은 브랜드 내 대소문자만 다른 이름 거부."""
        res = await client.post(
            _url(brand, "/new"), data=model_form(name="AIR MAX 90"), headers=AJAX
        )
        assert res.status_code == 400
        assert res.json()["message"] == "Ya existe un modelo con ese nombre en esta marca."
        assert len(db.brands.find_one({"_id": brand["_id"]})["models"]) == 1

    async def test_same_name_in_other_brand(self, client: AsyncClient, db: Database, brand, sneaker):
        """다른 브랜드에서는 같은 이름 허용."""
        other = brand_service.create_brand(db, brand_form(name="Adidas"))
        res = await client.post(_url(other, "/new"), data=model_form(), headers=AJAX)
        assert res.status_code == 201

    async def test_invalid_model(self, client: AsyncClient, uploads: Path, brand):
        """규칙 위반 — 400, 업로드 파일 삭제."""
        res = await client.post(
            _url(brand, "/new"),
            data=model_form(price="-5", average_rating="7"),
            files=image_file("cover_image"),
            headers=AJAX,
        )
        assert res.status_code == 400
        assert res.json()["message"].split("\n") == [
            "El precio debe ser un número positivo.",
            "La valoración debe estar entre 0 y 5.",
        ]
        assert list(uploads.iterdir()) == []

    async def test_overflowing_price_not_stored(self, client: AsyncClient, db: Database, brand):
        """무한대가 되는 가격은 거부, 목록 API는 계속 정상."""
        res = await client.post(
            _url(brand, "/new"), data=model_form(price="9" * 400), headers=AJAX
        )
        assert res.status_code == 400
        assert res.json()["message"] == "El precio debe ser un número positivo."
        assert db.brands.find_one({"_id": brand["_id"]})["models"] == []

        res = await client.get("/api/brands")
        assert res.status_code == 200
        assert res.json()["total"] == 1

    async def test_invalid_model_form_rerendered(self, client: AsyncClient, brand):
        res = await client.post(_url(brand, "/new"), data=model_form(release_year="1960"))
        assert res.status_code == 400
        assert "El año de lanzamiento debe estar entre 1970 y 2025." in res.text

    async def test_unknown_brand(self, client: AsyncClient):
        res = await client.post(
            "/brand/64b7f0c2a1b2c3d4e5f60718/model/new", data=model_form(), headers=AJAX
        )
        assert res.status_code == 404
        assert res.json()["message"] == "Marca no encontrada."


class TestModelRead:
    """모델 조회 테스트."""

    async def test_model_detail(self, client: AsyncClient, brand, sneaker):
        res = await client.get(_url(brand, f"/{sneaker['_id']}"))
        assert res.status_code == 200
        assert "Air Max 90" in res.text

    async def test_model_detail_ajax(self, client: AsyncClient, brand, sneaker):
        res = await client.get(_url(brand, f"/{sneaker['_id']}"), headers=AJAX)
        assert res.json()["model"]["_id"] == str(sneaker["_id"])

    async def test_new_and_edit_forms(self, client: AsyncClient, brand, sneaker):
        assert (await client.get(_url(brand, "/new"))).status_code == 200
        res = await client.get(_url(brand, f"/{sneaker['_id']}/edit"))
        assert res.status_code == 200
        assert 'value="Air Max 90"' in res.text

    async def test_unknown_model(self, client: AsyncClient, brand):
        res = await client.get(_url(brand, f"/{ObjectId()}"), headers=AJAX)
        assert res.status_code == 404
        assert res.json()["message"] == "Modelo no encontrado."

    async def test_brand_detail_lists_models(self, client: AsyncClient, brand, sneaker):
        res = await client.get(f"/brand/{brand['_id']}", headers=AJAX)
        models = res.json()["brand"]["models"]
        assert [m["name"] for m in models] == ["Air Max 90"]


class TestModelUpdate:
    """모델 수정 테스트."""

    async def test_update_model(self, client: AsyncClient, db: Database, brand, sneaker):
        res = await client.post(
            _url(brand, f"/{sneaker['_id']}/edit"),
            data=model_form(price="99.5", colorway="Negro"),
            headers=AJAX,
        )
        assert res.status_code == 200
        data = res.json()
        assert data["brandId"] == str(brand["_id"])
        assert data["model"]["_id"] == str(sneaker["_id"])
        assert data["model"]["price"] == 99.5

        stored = db.brands.find_one({"_id": brand["_id"]})["models"]
        assert len(stored) == 1
        assert stored[0]["_id"] == sneaker["_id"]
        assert stored[0]["colorway"] == "Negro"

    async def test_update_redirects(self, client: AsyncClient, brand, sneaker):
        res = await client.post(_url(brand, f"/{sneaker['_id']}/edit"), data=model_form())
        assert res.status_code == 303
        assert res.headers["location"] == f"/brand/{brand['_id']}/model/{sneaker['_id']}"

    async def test_keep_own_name_different_case(self, client: AsyncClient, brand, sneaker):
        """자기 자신의 이름 변경(대소문자)은 허용."""
        res = await client.post(
            _url(brand, f"/{sneaker['_id']}/edit"),
            data=model_form(name="AIR MAX 90"),
            headers=AJAX,
        )
        assert res.status_code == 200
        assert res.json()["model"]["name"] == "AIR MAX 90"

    async def test_rename_to_sibling_rejected(self, client: AsyncClient, brand, sneaker):
        res = await client.post(_url(brand, "/new"), data=model_form(name="Cortez"), headers=AJAX)
        cortez_id = res.json()["modelId"]
        res = await client.post(
            _url(brand, f"/{cortez_id}/edit"), data=model_form(name="air max 90"), headers=AJAX
        )
        assert res.status_code == 400
        assert res.json()["message"] == "Ya existe un modelo con ese nombre en esta marca."

    async def test_image_kept_without_upload(self, client: AsyncClient, db: Database, uploads: Path, brand):
        """이미지 입력 없이 수정 — imageFilename 유지."""
        res = await client.post(
            _url(brand, "/new"), data=model_form(), files=image_file("cover_image"), headers=AJAX
        )
        model_id = res.json()["modelId"]
        original = res.json()["model"]["imageFilename"]
        assert original

        res = await client.post(
            _url(brand, f"/{model_id}/edit"), data=model_form(name="Air Max 90 OG"), headers=AJAX
        )
        assert res.status_code == 200
        assert res.json()["model"]["imageFilename"] == original
        assert db.brands.find_one({"_id": brand["_id"]})["models"][0]["imageFilename"] == original
        assert (uploads / original).is_file()

    async def test_remove_image(self, client: AsyncClient, uploads: Path, brand):
        res = await client.post(
            _url(brand, "/new"), data=model_form(), files=image_file("cover_image"), headers=AJAX
        )
        model_id = res.json()["modelId"]
        original = res.json()["model"]["imageFilename"]

        res = await client.post(
            _url(brand, f"/{model_id}/edit"), data=model_form(remove_image="on"), headers=AJAX
        )
        assert res.json()["model"]["imageFilename"] is None
        assert not (uploads / original).exists()

    async def test_unknown_model(self, client: AsyncClient, brand):
        res = await client.post(_url(brand, f"/{ObjectId()}/edit"), data=model_form(), headers=AJAX)
        assert res.status_code == 404


class TestModelDelete:
    """모델 삭제 테스트."""

    async def test_delete_model(self, client: AsyncClient, db: Database, uploads: Path, brand):
        res = await client.post(
            _url(brand, "/new"), data=model_form(), files=image_file("cover_image"), headers=AJAX
        )
        model_id = res.json()["modelId"]
        filename = res.json()["model"]["imageFilename"]

        res = await client.post(_url(brand, f"/{model_id}/delete"), headers=AJAX)
        assert res.status_code == 200
        assert res.json()["brandId"] == str(brand["_id"])
        assert res.json()["modelId"] == model_id
        assert db.brands.find_one({"_id": brand["_id"]})["models"] == []
        assert not (uploads / filename).exists()

    async def test_delete_redirects(self, client: AsyncClient, brand, sneaker):
        res = await client.post(_url(brand, f"/{sneaker['_id']}/delete"))
        assert res.status_code == 303
        assert res.headers["location"] == f"/brand/{brand['_id']}"

    async def test_legacy_string_id(self, client: AsyncClient, db: Database, brand):
        """문자열 ID로 저장된 과거 모델도 찾아서 삭제."""
        legacy = {"_id": "legacy-1", **model_form(), "imageFilename": None}
        db.brands.update_one({"_id": brand["_id"]}, {"$set": {"models": [legacy]}})

        res = await client.post(_url(brand, "/legacy-1/delete"), headers=AJAX)
        assert res.status_code == 200
        assert db.brands.find_one({"_id": brand["_id"]})["models"] == []
