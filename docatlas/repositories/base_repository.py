"""Base repository with common CRUD operations."""
from typing import Any, Generic, Optional, Type, TypeVar

from sqlalchemy.orm import Session

from docatlas.core.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Generic base repository for common database operations."""

    def __init__(self, model: Type[ModelType], session: Session):
        """Initialize repository.

        Args:
            model: SQLAlchemy model class
            session: Database session
        """
        self.model = model
        self.session = session

    def get_by_id(self, id: Any) -> Optional[ModelType]:
        """Get model by primary key ID.

        Args:
            id: Primary key value

        Returns:
            Model instance or None if not found
        """
        return self.session.get(self.model, id)

    def create(self, obj: ModelType) -> ModelType:
        """Create new model instance.

        Args:
            obj: Model instance to create

        Returns:
            Created model instance with ID populated
        """
        self.session.add(obj)
        self.session.flush()
        self.session.refresh(obj)
        return obj

    def commit(self) -> None:
        """Commit the current transaction."""
        self.session.commit()
