"""Comment repository implementation with database"""
from typing import Iterable, List
from sqlalchemy.orm import Session
from helpdesk.domain.entities.comment import Comment
from helpdesk.domain.repositories.comment_repository import CommentRepository
from helpdesk.infrastructure.database.models import CommentModel


class CommentRepositoryDB(CommentRepository):
    """Append-only comment store"""

    def __init__(self, db: Session):
        self.db = db

    def _model_to_entity(self, model: CommentModel) -> Comment:
        return Comment(
            id=str(model.id),
            ticket_id=str(model.ticket_id),
            author=model.author,
            body=model.body,
            internal=bool(model.internal),
            created_at=model.created_at,
        )

    async def create(self, comment: Comment) -> Comment:
        """Append a comment"""
        try:
            comment_model = CommentModel(
                id=comment.id or None,
                ticket_id=comment.ticket_id,
                author=comment.author,
                body=comment.body,
                internal=comment.internal,
                created_at=comment.created_at,
            )
            self.db.add(comment_model)
            self.db.flush()
            self.db.commit()
            self.db.refresh(comment_model)
            return self._model_to_entity(comment_model)
        except Exception as e:
            self.db.rollback()
            print(f"❌ Error adding comment to ticket {comment.ticket_id}: {e}")
            raise

    async def list_for_ticket(self, ticket_id: str) -> List[Comment]:
        """Get all comments of a ticket, oldest first"""
        comment_models = (
            self.db.query(CommentModel)
            .filter(CommentModel.ticket_id == ticket_id)
            .order_by(CommentModel.created_at.asc())
            .all()
        )
        return [self._model_to_entity(model) for model in comment_models]

    async def delete_for_tickets(self, ticket_ids: Iterable[str]) -> int:
        """Remove the comments of deleted tickets"""
        ids = list(ticket_ids)
        if not ids:
            return 0
        try:
            deleted = (
                self.db.query(CommentModel)
                .filter(CommentModel.ticket_id.in_(ids))
                .delete(synchronize_session=False)
            )
            self.db.commit()
            return deleted
        except Exception as e:
            self.db.rollback()
            print(f"❌ Error deleting comments of tickets {ids}: {e}")
            raise
