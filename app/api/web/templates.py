"""HTML 페이지 템플릿 — 서버 렌더링 화면.

HTML page templates — Server-rendered catalog pages.
Pages are plain HTML strings with ``{{PLACEHOLDER}}`` slots; every value
inserted into them goes through ``html.escape``.
"""

import re
from html import escape
from typing import Any
from urllib.parse import urlencode

from fastapi.responses import HTMLResponse

from app.config import settings

LAYOUT_HTML = """<!DOCTYPE html>
<html lang="es">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{{TITLE}} · {{APP_NAME}}</title>
<link rel="stylesheet" href="https://cdn.jsdelivr.net/npm/bootstrap@5.3.3/dist/css/bootstrap.min.css">
</head>
<body class="bg-light">
<nav class="navbar navbar-dark bg-dark mb-4">
<div class="container">
<a class="navbar-brand" href="/index">{{APP_NAME}}</a>
<a class="btn btn-outline-light btn-sm" href="/new">Nueva marca</a>
</div>
</nav>
<main class="container pb-5">
{{CONTENT}}
</main>
</body>
</html>"""

_PLACEHOLDER_RE = re.compile(r"\{\{(TITLE|APP_NAME)\}\}")


def _e(value: Any) -> str:
    return escape("" if value is None else str(value), quote=True)


def render_page(title: str, content: str, status_code: int = 200) -> HTMLResponse:
    """레이아웃에 본문을 채워 응답을 만듭니다 (Wrap content in the layout).

    Placeholders are filled in the layout text only; inserted values are
    never scanned for further placeholders.
    """
    head, tail = LAYOUT_HTML.split("{{CONTENT}}")
    values: dict[str, str] = {"TITLE": _e(title), "APP_NAME": _e(settings.APP_NAME)}
    head = _PLACEHOLDER_RE.sub(lambda m: values[m.group(1)], head)
    return HTMLResponse(head + content + tail, status_code=status_code)


def _errors_block(errors: list[str] | None) -> str:
    if not errors:
        return ""
    items: str = "".join(f"<li>{_e(e)}</li>" for e in errors)
    return f'<div class="alert alert-danger"><ul class="mb-0">{items}</ul></div>'


def _image(src: str, alt: str, has_image: bool) -> str:
    if not has_image:
        return ""
    return f'<img src="{_e(src)}" alt="{_e(alt)}" class="card-img-top">'


# ---------------------------------------------------------------------------
# 목록 화면 — Listing
# ---------------------------------------------------------------------------
def index_page(
    page: dict[str, Any],
    categories: list[str],
    q: str | None,
    category: str | None,
) -> HTMLResponse:
    """브랜드 목록 화면 (Brand listing with search, category filter and paging)."""
    options: str = '<option value="">Todas las categorías</option>' + "".join(
        f'<option value="{_e(c)}"{" selected" if c == category else ""}>{_e(c)}</option>'
        for c in categories
    )
    cards: str = "".join(
        f'<div class="col-12 col-sm-6 col-lg-4"><a href="/brand/{_e(b["_id"])}" '
        f'class="text-decoration-none text-reset"><div class="card h-100">'
        f'{_image("/brand/" + b["_id"] + "/image", "Logo de " + b["name"], bool(b.get("imageFilename")))}'
        f'<div class="card-body"><h5 class="card-title">{_e(b["name"])}</h5>'
        f'<p class="card-text small text-muted">{_e(b["country_origin"])} • Fundada en {_e(b["founded_year"])}</p>'
        f"</div></div></a></div>"
        for b in page["items"]
    ) or '<p class="text-muted">No hay marcas que coincidan con la búsqueda.</p>'

    pager: list[str] = []
    for number in range(1, page["totalPages"] + 1):
        query: str = urlencode({"q": q or "", "category": category or "", "page": number})
        active: str = " active" if number == page["page"] else ""
        pager.append(f'<li class="page-item{active}"><a class="page-link" href="/index?{query}">{number}</a></li>')

    content: str = f"""
<form class="row g-2 mb-4" method="get" action="/index">
<div class="col-md-6"><input class="form-control" name="q" value="{_e(q)}" placeholder="Buscar marca o modelo"></div>
<div class="col-md-4"><select class="form-select" name="category">{options}</select></div>
<div class="col-md-2"><button class="btn btn-primary w-100" type="submit">Buscar</button></div>
</form>
<section id="marcas" data-current-page="{page["page"]}" data-total-pages="{page["totalPages"]}"
 data-q="{_e(q)}" data-category="{_e(category)}">
<p class="text-muted small">{page["total"]} marcas</p>
<div class="row g-4 grid-gap">{cards}</div>
<nav class="mt-4"><ul class="pagination">{"".join(pager)}</ul></nav>
</section>"""
    return render_page("Marcas", content)


# ---------------------------------------------------------------------------
# 브랜드 화면 — Brand pages
# ---------------------------------------------------------------------------
def brand_form_page(
    form: dict[str, Any] | None = None,
    errors: list[str] | None = None,
    brand_id: str | None = None,
    image_filename: str | None = None,
    status_code: int = 200,
) -> HTMLResponse:
    """브랜드 생성/수정 폼 (Brand create or edit form, re-populated on errors)."""
    form = form or {}
    editing: bool = brand_id is not None
    action: str = f"/brand/{brand_id}/edit" if editing else "/brand/new"
    remove_block: str = ""
    if editing and image_filename:
        remove_block = (
            '<div class="form-check mb-3"><input class="form-check-input" type="checkbox" '
            'name="remove_image" value="true" id="removeImage">'
            '<label class="form-check-label" for="removeImage">Quitar imagen actual</label></div>'
        )

    content: str = f"""
<h1 class="h3 mb-3">{"Editar marca" if editing else "Nueva marca"}</h1>
{_errors_block(errors)}
<form method="post" action="{action}" enctype="multipart/form-data" class="card card-body">
<div class="mb-3"><label class="form-label" for="brandName">Nombre</label>
<input class="form-control" id="brandName" name="name" required value="{_e(form.get("name"))}"></div>
<div class="mb-3"><label class="form-label" for="country">País de origen</label>
<input class="form-control" id="country" name="country_origin" required value="{_e(form.get("country_origin"))}"></div>
<div class="mb-3"><label class="form-label" for="founded">Año de fundación</label>
<input class="form-control" id="founded" name="founded_year" type="number" min="1900" max="2025" required
 value="{_e(form.get("founded_year"))}"></div>
<div class="mb-3"><label class="form-label" for="description">Descripción</label>
<textarea class="form-control" id="description" name="description" rows="4" required>{_e(form.get("description"))}</textarea></div>
<div class="mb-3"><label class="form-label" for="logo">Logo</label>
<input class="form-control" id="logo" name="brand_image" type="file" accept="image/*"></div>
{remove_block}
<button class="btn btn-primary" type="submit">Guardar</button>
</form>"""
    return render_page("Editar marca" if editing else "Nueva marca", content, status_code)


def brand_detail_page(brand: dict[str, Any]) -> HTMLResponse:
    """브랜드 상세 화면 — 모델 카드 포함 (Brand detail with model cards)."""
    brand_id: str = brand["_id"]
    model_cards: str = "".join(
        f'<div class="col-12 col-md-6" data-price="{_e(m["price"])}" data-description="{_e(m["description"])}">'
        f'<div class="card h-100">'
        f'{_image("/brand.models/" + m["_id"] + "/image", "Imagen de la sneaker " + m["name"], bool(m.get("imageFilename")))}'
        f'<div class="card-body"><h5 class="card-title">{_e(m["name"])}</h5>'
        f'<p class="mb-1 small text-muted">{_e(m["category"])} · {_e(m["release_year"])}</p>'
        f'<p class="mb-1 small text-muted">Colorway: {_e(m["colorway"])} · Tallas: {_e(m["size_range"])}</p>'
        f'<p class="fw-semibold">{m["price"]:.2f} € <span class="badge bg-warning text-dark">⭐ {_e(m["average_rating"])}</span></p>'
        f'<div class="d-flex gap-2">'
        f'<a class="btn btn-outline-secondary btn-sm" href="/brand/{_e(brand_id)}/model/{_e(m["_id"])}">Ver</a>'
        f'<a class="btn btn-outline-primary btn-sm js-edit-model" href="/brand/{_e(brand_id)}/model/{_e(m["_id"])}/edit">Editar</a>'
        f'<form class="js-delete-model" method="post" action="/brand/{_e(brand_id)}/model/{_e(m["_id"])}/delete">'
        f'<button class="btn btn-outline-danger btn-sm" type="submit">Borrar</button></form>'
        f"</div></div></div></div>"
        for m in brand["models"]
    ) or '<p class="text-muted">Esta marca todavía no tiene modelos.</p>'

    content: str = f"""
<div class="row g-4">
<div class="col-12 col-lg-5">
<div class="card">
{_image("/brand/" + brand_id + "/image", "Logo de " + brand["name"], bool(brand.get("imageFilename")))}
<div class="card-body">
<h1 class="h3">{_e(brand["name"])}</h1>
<p class="text-muted">{_e(brand["country_origin"])} • Fundada en {_e(brand["founded_year"])}</p>
<p>{_e(brand["description"])}</p>
<div class="d-flex gap-2">
<a class="btn btn-outline-primary" href="/brand/{_e(brand_id)}/edit">Editar</a>
<a class="btn btn-outline-success" href="/brand/{_e(brand_id)}/model/new">Añadir modelo</a>
<form class="js-delete-brand" method="post" action="/brand/{_e(brand_id)}/delete">
<button class="btn btn-outline-danger" type="submit">Borrar marca</button></form>
</div></div></div></div>
<div class="col-12 col-lg-7">
<h2 class="h4">Modelos</h2>
<div class="row g-4">{model_cards}</div>
</div></div>"""
    return render_page(brand["name"], content)


# ---------------------------------------------------------------------------
# 모델 화면 — Model pages
# ---------------------------------------------------------------------------
def model_form_page(
    brand: dict[str, Any],
    form: dict[str, Any] | None = None,
    errors: list[str] | None = None,
    model_id: str | None = None,
    image_filename: str | None = None,
    status_code: int = 200,
) -> HTMLResponse:
    """모델 생성/수정 폼 (Model create or edit form)."""
    form = form or {}
    brand_id: str = str(brand["_id"])
    editing: bool = model_id is not None
    action: str = (
        f"/brand/{brand_id}/model/{model_id}/edit" if editing else f"/brand/{brand_id}/model/new"
    )
    remove_block: str = ""
    if editing and image_filename:
        remove_block = (
            '<div class="form-check mb-3"><input class="form-check-input" type="checkbox" '
            'name="remove_image" value="true" id="removeImage">'
            '<label class="form-check-label" for="removeImage">Quitar imagen actual</label></div>'
        )

    content: str = f"""
<h1 class="h3 mb-3">{"Editar modelo" if editing else "Nuevo modelo"} · {_e(brand["name"])}</h1>
{_errors_block(errors)}
<form method="post" action="{_e(action)}" enctype="multipart/form-data" class="card card-body">
<div class="mb-3"><label class="form-label" for="modelName">Nombre</label>
<input class="form-control" id="modelName" name="name" required value="{_e(form.get("name"))}"></div>
<div class="row g-3 mb-3">
<div class="col-md-6"><label class="form-label" for="category">Categoría</label>
<input class="form-control" id="category" name="category" required value="{_e(form.get("category"))}"></div>
<div class="col-md-6"><label class="form-label" for="releaseYear">Año de lanzamiento</label>
<input class="form-control" id="releaseYear" name="release_year" type="number" min="1970" max="2025" required
 value="{_e(form.get("release_year"))}"></div>
</div>
<div class="mb-3"><label class="form-label" for="description">Descripción</label>
<textarea class="form-control" id="description" name="description" rows="3" required>{_e(form.get("description"))}</textarea></div>
<div class="row g-3 mb-3">
<div class="col-md-6"><label class="form-label" for="price">Precio</label>
<input class="form-control" id="price" name="price" type="number" step="0.01" min="0" required value="{_e(form.get("price"))}"></div>
<div class="col-md-6"><label class="form-label" for="rating">Valoración</label>
<input class="form-control" id="rating" name="average_rating" type="number" step="0.1" min="0" max="5"
 value="{_e(form.get("average_rating"))}"></div>
</div>
<div class="row g-3 mb-3">
<div class="col-md-6"><label class="form-label" for="colorway">Colorway</label>
<input class="form-control" id="colorway" name="colorway" value="{_e(form.get("colorway"))}"></div>
<div class="col-md-6"><label class="form-label" for="sizeRange">Tallas</label>
<input class="form-control" id="sizeRange" name="size_range" value="{_e(form.get("size_range"))}"></div>
</div>
<div class="mb-3"><label class="form-label" for="coverImage">Imagen</label>
<input class="form-control" id="coverImage" name="cover_image" type="file" accept="image/*"></div>
{remove_block}
<button class="btn btn-primary" type="submit">Guardar</button>
<a class="btn btn-link" href="/brand/{_e(brand_id)}">Volver a la marca</a>
</form>"""
    return render_page("Modelo", content, status_code)


def model_detail_page(brand: dict[str, Any], model: dict[str, Any]) -> HTMLResponse:
    """모델 상세 화면 (Model detail)."""
    brand_id: str = brand["_id"]
    content: str = f"""
<div class="card">
{_image("/brand.models/" + model["_id"] + "/image", "Imagen de la sneaker " + model["name"], bool(model.get("imageFilename")))}
<div class="card-body">
<h1 class="h3">{_e(model["name"])} <small class="text-muted">· {_e(brand["name"])}</small></h1>
<p class="text-muted">{_e(model["category"])} · {_e(model["release_year"])}</p>
<p>{_e(model["description"])}</p>
<ul class="list-unstyled">
<li>Precio: {model["price"]:.2f} €</li>
<li>Valoración: ⭐ {_e(model["average_rating"])}</li>
<li>Colorway: {_e(model["colorway"])}</li>
<li>Tallas: {_e(model["size_range"])}</li>
</ul>
<a class="btn btn-outline-primary" href="/brand/{_e(brand_id)}/model/{_e(model["_id"])}/edit">Editar</a>
<a class="btn btn-link" href="/brand/{_e(brand_id)}">Volver a la marca</a>
</div></div>"""
    return render_page(model["name"], content)


# ---------------------------------------------------------------------------
# 안내 화면 — Confirmation and error pages
# ---------------------------------------------------------------------------
def message_page(title: str, message: str, link: str, link_text: str) -> HTMLResponse:
    """작업 완료 안내 화면 (Intermediate confirmation page)."""
    content: str = f"""
<div class="alert alert-success">
<h1 class="h4">{_e(title)}</h1>
<p>{_e(message)}</p>
<a class="btn btn-success" href="{_e(link)}">{_e(link_text)}</a>
</div>"""
    return render_page(title, content)


def error_page(status_code: int, message: str) -> HTMLResponse:
    """오류 화면 (Error page for 4xx/5xx)."""
    lines: str = "<br>".join(_e(line) for line in str(message).split("\n"))
    content: str = f"""
<div class="alert alert-danger">
<h1 class="h4">Error {status_code}</h1>
<p>{lines}</p>
<a class="btn btn-outline-secondary" href="/index">Volver al listado</a>
</div>"""
    return render_page(f"Error {status_code}", content, status_code)
