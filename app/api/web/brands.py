"""브랜드 작업 라우터 — 생성/수정/삭제 (multipart 폼).

Brand action router — Create, edit and delete from multipart form posts.
AJAX callers get ``{success, message, ...}`` JSON; form posts get an HTML
confirmation page, a 303 redirect, or the re-rendered form on errors.
"""

from typing import Annotated, Any

from fastapi import APIRouter, File, Form, UploadFile, status
from fastapi.responses import RedirectResponse, Response

from app.api.deps import AjaxDep, DbDep, json_error, json_success, parse_flag
from app.api.web.templates import brand_form_page, message_page
from app.schemas.brand import brand_to_response, dump
from app.services.brand_service import brand_service
from app.utils.exceptions import BadRequestError

router: APIRouter = APIRouter()


def error_messages(exc: BadRequestError) -> list[str]:
    """예외에서 오류 메시지 목록을 꺼냅니다 (Itemized messages of a 400 error)."""
    return list(getattr(exc, "errors", None) or [str(exc.detail)])


@router.post("/brand/new")
def create_brand(
    db: DbDep,
    ajax: AjaxDep,
    name: Annotated[str, Form()] = "",
    country_origin: Annotated[str, Form()] = "",
    founded_year: Annotated[str, Form()] = "",
    description: Annotated[str, Form()] = "",
    brand_image: UploadFile | None = File(None),
) -> Response:
    """새 브랜드를 생성합니다.

    Create a brand. On success AJAX callers get 201 with ``brandId``;
    form posts get the confirmation page linking to the new brand.
    """
    form: dict[str, Any] = {
        "name": name,
        "country_origin": country_origin,
        "founded_year": founded_year,
        "description": description,
    }
    try:
        brand: dict[str, Any] = brand_service.create_brand(db, form, brand_image)
    except BadRequestError as exc:
        errors: list[str] = error_messages(exc)
        if ajax:
            return json_error("\n".join(errors))
        return brand_form_page(form, errors, status_code=status.HTTP_400_BAD_REQUEST)

    brand_id: str = str(brand["_id"])
    if ajax:
        return json_success(
            "Marca creada correctamente.",
            status_code=status.HTTP_201_CREATED,
            brandId=brand_id,
        )
    return message_page(
        "Marca creada",
        f"La marca {brand['name']} se ha guardado correctamente.",
        f"/brand/{brand_id}",
        "Ver marca",
    )


@router.post("/brand/{brand_id}/edit")
def update_brand(
    brand_id: str,
    db: DbDep,
    ajax: AjaxDep,
    name: Annotated[str, Form()] = "",
    country_origin: Annotated[str, Form()] = "",
    founded_year: Annotated[str, Form()] = "",
    description: Annotated[str, Form()] = "",
    remove_image: Annotated[str, Form()] = "",
    brand_image: UploadFile | None = File(None),
) -> Response:
    """브랜드 정보를 수정합니다.

    Edit a brand's fields and image. Unknown identifiers raise 404 through
    the application's exception handlers.
    """
    form: dict[str, Any] = {
        "name": name,
        "country_origin": country_origin,
        "founded_year": founded_year,
        "description": description,
    }
    try:
        brand: dict[str, Any] = brand_service.update_brand(
            db, brand_id, form, brand_image, remove_image=parse_flag(remove_image)
        )
    except BadRequestError as exc:
        errors: list[str] = error_messages(exc)
        if ajax:
            return json_error("\n".join(errors))
        current: dict[str, Any] = brand_service.get_brand(db, brand_id)
        return brand_form_page(
            form,
            errors,
            brand_id=str(current["_id"]),
            image_filename=current.get("imageFilename"),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    if ajax:
        return json_success(
            "Marca actualizada correctamente.",
            brandId=str(brand["_id"]),
            brand=dump(brand_to_response(brand)),
        )
    return RedirectResponse(f"/brand/{brand['_id']}", status_code=status.HTTP_303_SEE_OTHER)


@router.post("/brand/{brand_id}/delete")
def delete_brand(brand_id: str, db: DbDep, ajax: AjaxDep) -> Response:
    """브랜드를 삭제합니다 — 이미지 파일 포함.

    Delete a brand together with its image files.
    """
    deleted: dict[str, Any] = brand_service.delete_brand(db, brand_id)
    if ajax:
        return json_success("Marca eliminada correctamente.", redirectUrl="/index")
    return message_page(
        "Marca eliminada",
        f"La marca {deleted.get('name', '')} se ha eliminado.",
        "/index",
        "Volver al listado",
    )
