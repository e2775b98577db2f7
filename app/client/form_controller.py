"""폼 컨트롤러 — 카탈로그 폼의 비동기 제출 클라이언트.

Form controller — Async client driving the catalog's create/edit forms.
Mirrors what the browser does before posting a form: check the shared
rules locally, probe both name-uniqueness endpoints concurrently, then
post with ``X-Requested-With: XMLHttpRequest`` and read the JSON answer.
The server repeats every check; the local ones only save a round trip.
"""

import asyncio
import copy
from typing import Any, Literal

import httpx
from loguru import logger
from pydantic import BaseModel, Field

from app.schemas.rules import MODEL_RULES, RULE_SETS, RuleSet, validate_form
from app.services.brand_service import DUPLICATE_BRAND
from app.services.model_service import DUPLICATE_MODEL

FormKind = Literal["brand", "model"]

SAVE_FAILED: str = "Error al guardar. Intenta nuevamente."

AJAX_HEADERS: dict[str, str] = {"X-Requested-With": "XMLHttpRequest"}


class SubmitResult(BaseModel):
    """폼 제출 결과.

    Outcome of one submission. ``form`` always holds the values that were
    submitted so a caller can re-populate the form and retry.

    Attributes:
        success: 서버가 저장에 성공했는지 (Server accepted and persisted)
        message: 서버 또는 로컬 메시지 (Server or local message)
        errors: 항목별 오류 목록 (Itemized error messages)
        data: 성공 응답의 나머지 필드 (Remaining payload, e.g. brandId)
        form: 제출한 원본 값 (Values as submitted)
        status_code: HTTP 상태 코드, 전송 실패 시 None (None on transport errors)
    """

    success: bool
    message: str = ""
    errors: list[str] = Field(default_factory=list)
    data: dict[str, Any] = Field(default_factory=dict)
    form: dict[str, Any] = Field(default_factory=dict)
    status_code: int | None = None


def _form_data(form: dict[str, Any]) -> dict[str, str]:
    return {key: "" if value is None else str(value) for key, value in form.items()}


class CatalogFormController:
    """카탈로그 폼 제출 컨트롤러.

    Args:
        client: 서버를 가리키는 httpx 비동기 클라이언트 (Client bound to the server)
        submit_delay: 제출 전 대기 시간(초) — 로딩 표시용
                      (Fixed pause before posting, lets a spinner show)
    """

    def __init__(self, client: httpx.AsyncClient, submit_delay: float = 0.0) -> None:
        self.client: httpx.AsyncClient = client
        self.submit_delay: float = submit_delay
        self.rules: dict[str, RuleSet] = dict(RULE_SETS)

    async def load_rules(self) -> dict[str, RuleSet]:
        """서버의 규칙 테이블을 불러옵니다.

        Fetch ``/api/validation-rules``; on any failure the bundled table
        stays in use.
        """
        try:
            response = await self.client.get("/api/validation-rules")
            response.raise_for_status()
            payload: dict[str, Any] = response.json()
            self.rules = {kind: RuleSet.model_validate(payload[kind]) for kind in RULE_SETS}
        except (httpx.HTTPError, ValueError, KeyError) as exc:
            logger.warning(f"Could not load validation rules, using bundled ones: {exc}")
        return self.rules

    def validate(self, kind: FormKind, form: dict[str, Any]) -> list[str]:
        """로컬 규칙 검사 (Local rule check; returns the error messages)."""
        _, errors = validate_form(self.rules[kind], form)
        return errors

    async def _probe(self, path: str, payload: dict[str, Any]) -> bool:
        # 확인 실패는 사용 가능으로 간주 — A failed probe never blocks the form
        try:
            response = await self.client.post(path, json=payload, headers=AJAX_HEADERS)
            response.raise_for_status()
            body: Any = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.debug(f"Name probe {path} failed: {exc}")
            return True
        if not isinstance(body, dict):
            logger.debug(f"Name probe {path} returned a non-object body")
            return True
        return bool(body.get("available", True))

    async def _available(self) -> bool:
        return True

    async def check_names(
        self,
        brand_name: str | None = None,
        model_name: str | None = None,
        brand_id: str | None = None,
        exclude_brand_id: str | None = None,
        exclude_model_id: str | None = None,
    ) -> list[str]:
        """브랜드/모델 이름 중복을 동시에 확인합니다.

        Run the brand-name and model-name probes concurrently and join them.

        Returns:
            list[str]: 중복 메시지 목록, 없으면 빈 목록 (Duplicate messages)
        """
        brand_probe = (
            self._probe("/api/check-brand-name", {"name": brand_name, "excludeId": exclude_brand_id})
            if brand_name
            else self._available()
        )
        model_probe = (
            self._probe(
                "/api/check-model-name",
                {"name": model_name, "brandId": brand_id, "excludeModelId": exclude_model_id},
            )
            if model_name and brand_id
            else self._available()
        )
        brand_free, model_free = await asyncio.gather(brand_probe, model_probe)

        messages: list[str] = []
        if not brand_free:
            messages.append(DUPLICATE_BRAND)
        if not model_free:
            messages.append(DUPLICATE_MODEL)
        return messages

    async def submit(
        self,
        kind: FormKind,
        action: str,
        form: dict[str, Any],
        files: dict[str, Any] | None = None,
        brand_id: str | None = None,
        exclude_id: str | None = None,
    ) -> SubmitResult:
        """폼을 검사하고 서버에 제출합니다.

        Validate locally, probe name uniqueness, wait ``submit_delay``, then
        post the form as multipart with the AJAX header.

        Args:
            kind: "brand" 또는 "model" (Which rule set applies)
            action: 제출 경로 (Form action path, e.g. ``/brand/new``)
            form: 필드 값 (Field values)
            files: httpx ``files`` 인자 (Optional image upload)
            brand_id: 모델 폼의 브랜드 ID (Owning brand for model forms)
            exclude_id: 수정 중인 브랜드/모델 ID (Record being edited)

        Returns:
            SubmitResult: 제출 결과 (Outcome with the original form preserved)
        """
        original: dict[str, Any] = dict(form)
        errors: list[str] = self.validate(kind, form)

        name: str = str(form.get("name") or "").strip()
        if kind == "brand":
            errors += await self.check_names(brand_name=name, exclude_brand_id=exclude_id)
        else:
            errors += await self.check_names(
                model_name=name, brand_id=brand_id, exclude_model_id=exclude_id
            )
        if errors:
            return SubmitResult(success=False, message="\n".join(errors), errors=errors, form=original)

        if self.submit_delay > 0:
            await asyncio.sleep(self.submit_delay)

        try:
            response = await self.client.post(
                action, data=_form_data(form), files=files, headers=AJAX_HEADERS
            )
        except httpx.HTTPError as exc:
            logger.warning(f"Submit to {action} failed: {exc}")
            return SubmitResult(success=False, message=SAVE_FAILED, errors=[SAVE_FAILED], form=original)

        try:
            body: Any = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        success: bool = response.is_success and bool(body.get("success"))
        message: str = str(body.get("message") or ("" if success else SAVE_FAILED))
        return SubmitResult(
            success=success,
            message=message,
            errors=[] if success else message.split("\n"),
            data={k: v for k, v in body.items() if k not in ("success", "message")},
            form=original,
            status_code=response.status_code,
        )


class InlineModelEdit:
    """모델 카드 인라인 수정.

    Inline edit of one model card. The card's values are snapshotted when
    editing starts; ``edit`` stages changes, ``submit`` posts them and on
    success adopts the server's copy, ``cancel`` restores the snapshot.
    """

    def __init__(self, controller: CatalogFormController, brand_id: str, model: dict[str, Any]) -> None:
        self.controller: CatalogFormController = controller
        self.brand_id: str = str(brand_id)
        self.model_id: str = str(model["_id"])
        self.snapshot: dict[str, Any] = copy.deepcopy(model)
        self.model: dict[str, Any] = copy.deepcopy(model)

    def edit(self, **changes: Any) -> dict[str, Any]:
        self.model.update(changes)
        return self.model

    async def submit(
        self,
        changes: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
    ) -> SubmitResult:
        """변경 사항을 서버에 저장합니다 (Post the staged card values)."""
        if changes:
            self.edit(**changes)
        form: dict[str, Any] = {rule.field: self.model.get(rule.field) for rule in MODEL_RULES.rules}
        result: SubmitResult = await self.controller.submit(
            "model",
            f"/brand/{self.brand_id}/model/{self.model_id}/edit",
            form,
            files=files,
            brand_id=self.brand_id,
            exclude_id=self.model_id,
        )
        if result.success and isinstance(result.data.get("model"), dict):
            self.model = copy.deepcopy(result.data["model"])
            self.snapshot = copy.deepcopy(self.model)
        return result

    def cancel(self) -> dict[str, Any]:
        """편집 취소 — 스냅샷 복원 (Discard staged edits)."""
        self.model = copy.deepcopy(self.snapshot)
        return self.model
