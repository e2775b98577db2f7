"""카탈로그 폼 클라이언트 (Async form client for the catalog server)."""

from app.client.form_controller import CatalogFormController, InlineModelEdit, SubmitResult

__all__ = ["CatalogFormController", "InlineModelEdit", "SubmitResult"]
