"""브랜드 CRUD 테스트.

Brand CRUD tests — Create, read, edit and delete through the form routes,
both as AJAX (JSON) and as plain form posts (HTML).
"""

from pathlib import Path

import pytest
from httpx import AsyncClient
from pymongo.database import Database

from app.services.brand_service import brand_service
from tests.conftest import AJAX, brand_form, image_file, model_form


class TestBrandCreate:
    """브랜드 생성 테스트."""

    async def test_create_brand_ajax(self, client: AsyncClient, db: Database):
        """AJAX 생성 성공 — 201과 brandId."""
        res = await client.post("/brand/new", data=brand_form(), headers=AJAX)
        assert res.status_code == 201
        data = res.json()
        assert data["success"] is True
        stored = db.brands.find_one({"name": "Nike"})
        assert stored is not None
        assert data["brandId"] == str(stored["_id"])
        assert stored["models"] == []
        assert stored["founded_year"] == 1964

    async def test_create_brand_html_confirmation(self, client: AsyncClient, db: Database):
        """폼 제출 성공 — 새 브랜드 링크가 있는 확인 화면."""
        res = await client.post("/brand/new", data=brand_form())
        assert res.status_code == 200
        assert "text/html" in res.headers["content-type"]
        brand_id = str(db.brands.find_one({"name": "Nike"})["_id"])
        assert f"/brand/{brand_id}" in res.text

    async def test_create_with_image(self, client: AsyncClient, db: Database, uploads: Path):
        """이미지와 함께 생성 — 파일 저장 및 파일명 기록."""
        res = await client.post(
            "/brand/new", data=brand_form(), files=image_file("brand_image"), headers=AJAX
        )
        assert res.status_code == 201
        filename = db.brands.find_one({"name": "Nike"})["imageFilename"]
        assert filename and filename.endswith(".png")
        assert (uploads / filename).is_file()

    async def test_lowercase_name_rejected(self, client: AsyncClient, db: Database, uploads: Path):
        """소문자 이름 거부 — 저장 없음, 업로드 파일 삭제."""
        res = await client.post(
            "/brand/new",
            data=brand_form(name="nike"),
            files=image_file("brand_image"),
            headers=AJAX,
        )
        assert res.status_code == 400
        assert res.json() == {
            "success": False,
            "message": "El nombre debe comenzar por una letra mayúscula.",
        }
        assert db.brands.count_documents({}) == 0
        assert list(uploads.iterdir()) == []

    @pytest.mark.parametrize("name", ["élan", "ñandú", "1nike"])
    async def test_non_uppercase_initial_not_stored(self, client: AsyncClient, db: Database, name):
        res = await client.post("/brand/new", data=brand_form(name=name), headers=AJAX)
        assert res.status_code == 400
        assert res.json()["message"] == "El nombre debe comenzar por una letra mayúscula."
        assert db.brands.count_documents({}) == 0

    async def test_year_out_of_range(self, client: AsyncClient, db: Database):
        res = await client.post("/brand/new", data=brand_form(founded_year="1899"), headers=AJAX)
        assert res.status_code == 400
        assert res.json()["message"] == "El año de fundación debe estar entre 1900 y 2025."
        assert db.brands.count_documents({}) == 0

    async def test_year_upper_bound_accepted(self, client: AsyncClient):
        res = await client.post("/brand/new", data=brand_form(founded_year="2025"), headers=AJAX)
        assert res.status_code == 201

    async def test_oversized_year_is_validation_error(self, client: AsyncClient, db: Database):
        """아주 긴 연도 값 — 500이 아닌 400."""
        res = await client.post(
            "/brand/new", data=brand_form(founded_year="9" * 5000), headers=AJAX
        )
        assert res.status_code == 400
        assert res.json()["message"] == "El año de fundación debe ser un número."
        assert db.brands.count_documents({}) == 0

    async def test_errors_joined_by_newline(self, client: AsyncClient):
        """여러 오류는 줄바꿈으로 연결."""
        res = await client.post(
            "/brand/new",
            data=brand_form(name="nike", description="Corta"),
            headers=AJAX,
        )
        assert res.status_code == 400
        assert res.json()["message"].split("\n") == [
            "El nombre debe comenzar por una letra mayúscula.",
            "La descripción debe tener entre 20 y 300 caracteres.",
        ]

    async def test_invalid_form_rerendered(self, client: AsyncClient):
        """폼 제출 실패 — 입력값과 오류가 있는 폼을 400으로 다시 표시."""
        res = await client.post("/brand/new", data=brand_form(name="nike"))
        assert res.status_code == 400
        assert "text/html" in res.headers["content-type"]
        assert "El nombre debe comenzar por una letra mayúscula." in res.text
        assert 'value="nike"' in res.text

    async def test_non_image_upload_rejected(self, client: AsyncClient, db: Database):
        res = await client.post(
            "/brand/new",
            data=brand_form(),
            files={"brand_image": ("notes.txt", b"hola", "text/plain")},
            headers=AJAX,
        )
        assert res.status_code == 400
        assert res.json()["message"] == "El fichero debe ser una imagen."
        assert db.brands.count_documents({}) == 0


class TestBrandNameUniqueness:
    """브랜드 이름 중복 테스트 — 대소문자 구분."""

    async def test_exact_duplicate_rejected(self, client: AsyncClient, db: Database, brand):
        res = await client.post("/brand/new", data=brand_form(), headers=AJAX)
        assert res.status_code == 400
        assert res.json()["message"] == "Ya existe una marca con ese nombre."
        assert db.brands.count_documents({}) == 1

    async def test_different_case_accepted(self, client: AsyncClient, db: Database, brand):
        """대소문자만 다른 이름(Nike, NIKE)은 서로 다른 브랜드."""
        res = await client.post("/brand/new", data=brand_form(name="NIKE"), headers=AJAX)
        assert res.status_code == 201
        assert db.brands.count_documents({}) == 2

    async def test_edit_keeps_own_name(self, client: AsyncClient, brand):
        """수정 시 자기 이름은 중복이 아님."""
        res = await client.post(
            f"/brand/{brand['_id']}/edit",
            data=brand_form(country_origin="EE. UU."),
            headers=AJAX,
        )
        assert res.status_code == 200
        assert res.json()["brand"]["country_origin"] == "EE. UU."


class TestBrandRead:
    """브랜드 조회 테스트."""

    async def test_detail_page(self, client: AsyncClient, brand):
        res = await client.get(f"/brand/{brand['_id']}")
        assert res.status_code == 200
        assert "Nike" in res.text

    async def test_detail_alias(self, client: AsyncClient, brand):
        res = await client.get(f"/detail/{brand['_id']}")
        assert res.status_code == 200
        assert "Nike" in res.text

    async def test_detail_ajax_json(self, client: AsyncClient, brand):
        """AJAX 상세 요청은 JSON."""
        res = await client.get(f"/brand/{brand['_id']}", headers=AJAX)
        assert res.status_code == 200
        data = res.json()
        assert data["success"] is True
        assert data["brand"]["_id"] == str(brand["_id"])
        assert data["brand"]["models"] == []

    async def test_unknown_brand_html_404(self, client: AsyncClient):
        res = await client.get("/brand/64b7f0c2a1b2c3d4e5f60718")
        assert res.status_code == 404
        assert "text/html" in res.headers["content-type"]
        assert "Marca no encontrada." in res.text

    async def test_malformed_id_ajax_404(self, client: AsyncClient):
        """잘못된 형식의 ID도 404."""
        res = await client.get("/brand/not-an-id", headers=AJAX)
        assert res.status_code == 404
        assert res.json() == {"success": False, "message": "Marca no encontrada."}

    async def test_placeholder_text_in_name_kept_literal(self, client: AsyncClient, db: Database):
        """이름 속 레이아웃 자리표시자는 치환되지 않음."""
        created = brand_service.create_brand(db, brand_form(name="Zapas {{APP_NAME}} {{CONTENT}}"))
        res = await client.get(f"/brand/{created['_id']}")
        assert res.status_code == 200
        assert "<title>Zapas {{APP_NAME}} {{CONTENT}} · " in res.text
        assert res.text.count("<main") == 1

    async def test_forms_render(self, client: AsyncClient, brand):
        assert (await client.get("/new")).status_code == 200
        res = await client.get(f"/brand/{brand['_id']}/edit")
        assert res.status_code == 200
        assert 'value="Nike"' in res.text


class TestBrandUpdate:
    """브랜드 수정 테스트."""

    async def test_update_redirects(self, client: AsyncClient, db: Database, brand):
        """폼 수정 성공 — 상세 화면으로 303."""
        res = await client.post(f"/brand/{brand['_id']}/edit", data=brand_form(name="Nike Inc"))
        assert res.status_code == 303
        assert res.headers["location"] == f"/brand/{brand['_id']}"
        assert db.brands.find_one({"_id": brand["_id"]})["name"] == "Nike Inc"

    async def test_update_invalid(self, client: AsyncClient, db: Database, brand):
        res = await client.post(
            f"/brand/{brand['_id']}/edit", data=brand_form(founded_year="abc"), headers=AJAX
        )
        assert res.status_code == 400
        assert res.json()["message"] == "El año de fundación debe ser un número."
        assert db.brands.find_one({"_id": brand["_id"]})["founded_year"] == 1964

    async def test_update_unknown_brand(self, client: AsyncClient, uploads: Path):
        """존재하지 않는 브랜드 수정 — 404, 업로드 파일 삭제."""
        res = await client.post(
            "/brand/64b7f0c2a1b2c3d4e5f60718/edit",
            data=brand_form(),
            files=image_file("brand_image"),
            headers=AJAX,
        )
        assert res.status_code == 404
        assert list(uploads.iterdir()) == []

    async def test_image_kept_without_upload(self, client: AsyncClient, db: Database, uploads: Path):
        res = await client.post(
            "/brand/new", data=brand_form(), files=image_file("brand_image"), headers=AJAX
        )
        brand_id = res.json()["brandId"]
        original = db.brands.find_one({"name": "Nike"})["imageFilename"]

        res = await client.post(f"/brand/{brand_id}/edit", data=brand_form(), headers=AJAX)
        assert res.status_code == 200
        assert res.json()["brand"]["imageFilename"] == original
        assert (uploads / original).is_file()

    async def test_image_replaced(self, client: AsyncClient, db: Database, uploads: Path):
        """새 이미지 업로드 — 이전 파일 삭제."""
        res = await client.post(
            "/brand/new", data=brand_form(), files=image_file("brand_image"), headers=AJAX
        )
        brand_id = res.json()["brandId"]
        original = db.brands.find_one({"name": "Nike"})["imageFilename"]

        res = await client.post(
            f"/brand/{brand_id}/edit",
            data=brand_form(),
            files=image_file("brand_image", "nuevo.png"),
            headers=AJAX,
        )
        replaced = res.json()["brand"]["imageFilename"]
        assert replaced != original
        assert (uploads / replaced).is_file()
        assert not (uploads / original).exists()

    async def test_remove_image(self, client: AsyncClient, db: Database, uploads: Path):
        res = await client.post(
            "/brand/new", data=brand_form(), files=image_file("brand_image"), headers=AJAX
        )
        brand_id = res.json()["brandId"]
        original = db.brands.find_one({"name": "Nike"})["imageFilename"]

        res = await client.post(
            f"/brand/{brand_id}/edit", data=brand_form(remove_image="true"), headers=AJAX
        )
        assert res.json()["brand"]["imageFilename"] is None
        assert not (uploads / original).exists()


class TestBrandDelete:
    """브랜드 삭제 테스트."""

    async def test_delete_ajax(self, client: AsyncClient, db: Database, brand):
        res = await client.post(f"/brand/{brand['_id']}/delete", headers=AJAX)
        assert res.status_code == 200
        assert res.json()["redirectUrl"] == "/index"
        assert db.brands.count_documents({}) == 0

    async def test_delete_removes_images(self, client: AsyncClient, db: Database, uploads: Path):
        """브랜드 삭제 시 로고와 모델 이미지 파일도 삭제."""
        res = await client.post(
            "/brand/new", data=brand_form(), files=image_file("brand_image"), headers=AJAX
        )
        brand_id = res.json()["brandId"]
        await client.post(
            f"/brand/{brand_id}/model/new",
            data=model_form(),
            files=image_file("cover_image", "cover.png"),
            headers=AJAX,
        )
        assert len(list(uploads.iterdir())) == 2

        res = await client.post(f"/brand/{brand_id}/delete")
        assert res.status_code == 200
        assert "text/html" in res.headers["content-type"]
        assert list(uploads.iterdir()) == []

    async def test_delete_unknown(self, client: AsyncClient):
        res = await client.post("/brand/64b7f0c2a1b2c3d4e5f60718/delete", headers=AJAX)
        assert res.status_code == 404

    async def test_create_fetch_delete_round_trip(self, client: AsyncClient):
        """생성 → 조회 → 삭제 → 조회 404."""
        res = await client.post("/brand/new", data=brand_form(name="Adidas"), headers=AJAX)
        brand_id = res.json()["brandId"]

        res = await client.get(f"/api/brands/{brand_id}")
        assert res.json()["brand"]["name"] == "Adidas"

        assert (await client.post(f"/brand/{brand_id}/delete", headers=AJAX)).status_code == 200
        assert (await client.get(f"/api/brands/{brand_id}")).status_code == 404
