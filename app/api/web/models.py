"""모델 라우터 — 브랜드에 내장된 스니커즈 모델 화면 및 작업.

Model router — Pages and actions for sneaker models embedded in a brand.
The ``/model/new`` routes are declared before ``/model/{model_id}`` so the
literal segment wins.
"""

from typing import Annotated, Any

from fastapi import APIRouter, File, Form, UploadFile, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from app.api.deps import AjaxDep, DbDep, json_error, json_success, parse_flag
from app.api.web.brands import error_messages
from app.api.web.templates import model_detail_page, model_form_page
from app.schemas.brand import brand_to_response, dump, model_to_response
from app.services.brand_service import brand_service
from app.services.model_service import model_service
from app.utils.exceptions import BadRequestError

router: APIRouter = APIRouter()


def model_form_values(model: dict[str, Any]) -> dict[str, Any]:
    return {
        "name": model.get("name", ""),
        "category": model.get("category", ""),
        "description": model.get("description", ""),
        "release_year": model.get("release_year", ""),
        "price": model.get("price", ""),
        "average_rating": model.get("average_rating", ""),
        "colorway": model.get("colorway", ""),
        "size_range": model.get("size_range", ""),
    }


@router.get("/brand/{brand_id}/model/new", response_class=HTMLResponse)
def new_model_form(brand_id: str, db: DbDep) -> HTMLResponse:
    """새 모델 폼 (Empty new-model form for a brand)."""
    brand: dict[str, Any] = brand_service.get_brand(db, brand_id)
    return model_form_page(brand)


@router.post("/brand/{brand_id}/model/new")
def create_model(
    brand_id: str,
    db: DbDep,
    ajax: AjaxDep,
    name: Annotated[str, Form()] = "",
    category: Annotated[str, Form()] = "",
    description: Annotated[str, Form()] = "",
    release_year: Annotated[str, Form()] = "",
    price: Annotated[str, Form()] = "",
    average_rating: Annotated[str, Form()] = "",
    colorway: Annotated[str, Form()] = "",
    size_range: Annotated[str, Form()] = "",
    cover_image: UploadFile | None = File(None),
) -> Response:
    """브랜드에 모델을 추가합니다.

    Add a model to a brand. AJAX callers get 201 with ``brandId``,
    ``modelId`` and the stored ``model``; form posts are redirected to the
    brand page.

    Raises:
        NotFoundError: 브랜드를 찾을 수 없을 때 (Brand not found)
    """
    form: dict[str, Any] = {
        "name": name,
        "category": category,
        "description": description,
        "release_year": release_year,
        "price": price,
        "average_rating": average_rating,
        "colorway": colorway,
        "size_range": size_range,
    }
    try:
        brand, model = model_service.create_model(db, brand_id, form, cover_image)
    except BadRequestError as exc:
        errors: list[str] = error_messages(exc)
        if ajax:
            return json_error("\n".join(errors))
        current: dict[str, Any] = brand_service.get_brand(db, brand_id)
        return model_form_page(current, form, errors, status_code=status.HTTP_400_BAD_REQUEST)

    if ajax:
        return json_success(
            "Modelo añadido correctamente.",
            status_code=status.HTTP_201_CREATED,
            brandId=str(brand["_id"]),
            modelId=str(model["_id"]),
            model=dump(model_to_response(model)),
        )
    return RedirectResponse(f"/brand/{brand['_id']}", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/brand/{brand_id}/model/{model_id}")
def model_detail(brand_id: str, model_id: str, db: DbDep, ajax: AjaxDep) -> Response:
    """모델 상세 — AJAX 요청은 JSON (Model detail, JSON for AJAX callers)."""
    brand, model = model_service.get_model(db, brand_id, model_id)
    payload: dict[str, Any] = dump(model_to_response(model))
    if ajax:
        return json_success("", brandId=str(brand["_id"]), model=payload)
    return model_detail_page(dump(brand_to_response(brand)), payload)


@router.get("/brand/{brand_id}/model/{model_id}/edit", response_class=HTMLResponse)
def edit_model_form(brand_id: str, model_id: str, db: DbDep) -> HTMLResponse:
    brand, model = model_service.get_model(db, brand_id, model_id)
    return model_form_page(
        brand,
        model_form_values(model),
        model_id=str(model["_id"]),
        image_filename=model.get("imageFilename"),
    )


@router.post("/brand/{brand_id}/model/{model_id}/edit")
def update_model(
    brand_id: str,
    model_id: str,
    db: DbDep,
    ajax: AjaxDep,
    name: Annotated[str, Form()] = "",
    category: Annotated[str, Form()] = "",
    description: Annotated[str, Form()] = "",
    release_year: Annotated[str, Form()] = "",
    price: Annotated[str, Form()] = "",
    average_rating: Annotated[str, Form()] = "",
    colorway: Annotated[str, Form()] = "",
    size_range: Annotated[str, Form()] = "",
    remove_image: Annotated[str, Form()] = "",
    cover_image: UploadFile | None = File(None),
) -> Response:
    """모델 정보를 수정합니다.

    Edit a model in place. Without a new image or ``remove_image`` the
    stored image is kept.
    """
    form: dict[str, Any] = {
        "name": name,
        "category": category,
        "description": description,
        "release_year": release_year,
        "price": price,
        "average_rating": average_rating,
        "colorway": colorway,
        "size_range": size_range,
    }
    try:
        brand, model = model_service.update_model(
            db, brand_id, model_id, form, cover_image, remove_image=parse_flag(remove_image)
        )
    except BadRequestError as exc:
        errors: list[str] = error_messages(exc)
        if ajax:
            return json_error("\n".join(errors))
        current_brand, current = model_service.get_model(db, brand_id, model_id)
        return model_form_page(
            current_brand,
            form,
            errors,
            model_id=str(current["_id"]),
            image_filename=current.get("imageFilename"),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    if ajax:
        return json_success(
            "Modelo actualizado correctamente.",
            brandId=str(brand["_id"]),
            model=dump(model_to_response(model)),
        )
    return RedirectResponse(
        f"/brand/{brand['_id']}/model/{model['_id']}",
        status_code=status.HTTP_303_SEE_OTHER,
    )


@router.post("/brand/{brand_id}/model/{model_id}/delete")
def delete_model(brand_id: str, model_id: str, db: DbDep, ajax: AjaxDep) -> Response:
    """모델을 삭제합니다 (Remove a model and its image file)."""
    brand, removed = model_service.delete_model(db, brand_id, model_id)
    if ajax:
        return json_success(
            "Modelo eliminado correctamente.",
            brandId=str(brand["_id"]),
            modelId=str(removed["_id"]),
        )
    return RedirectResponse(f"/brand/{brand['_id']}", status_code=status.HTTP_303_SEE_OTHER)
