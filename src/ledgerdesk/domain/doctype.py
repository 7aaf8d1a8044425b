"""Doc type domain service."""

from ledgerdesk.database.base import Database
from ledgerdesk.domain.entities import DocType, DocTypeNames
from ledgerdesk.domain.errors import NotFoundError, ValidationError, doc_type_not_found


class DocTypeService:
    """Service for managing document templates."""

    def __init__(self, db: Database):
        self.db = db

    def create_doc_type(self, name_en: str, name_ar: str) -> int:
        """Create a doc type.

        Raises:
            ValidationError: If either name is empty
        """
        name_en = (name_en or "").strip()
        name_ar = (name_ar or "").strip()
        if not name_en or not name_ar:
            raise ValidationError("docTypeNameRequired", "Doc type needs both an English and an Arabic name")
        return self.db.create_doc_type(name_en=name_en, name_ar=name_ar)

    def get_doc_type(self, doc_type_id: int) -> DocType:
        doc_type = self.db.get_doc_type(doc_type_id)
        if doc_type is None:
            raise NotFoundError(doc_type_not_found(doc_type_id))
        return doc_type

    def get_doc_type_names(self, doc_type_id: int) -> DocTypeNames:
        doc_type = self.get_doc_type(doc_type_id)
        return DocTypeNames(name_en=doc_type.name_en, name_ar=doc_type.name_ar)

    def list_doc_types(self) -> list[DocType]:
        return self.db.list_doc_types()
