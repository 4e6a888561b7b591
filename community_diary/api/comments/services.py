# community_diary/api/comments/services.py

import logging
import uuid
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List

from community_diary.api.comments.schemas import CommentSchema
from community_diary.core.errors import NotFoundError, ForbiddenError, raise_operation_error
from community_diary.models.comment import Comment
from community_diary.services.document_store import DocumentStore

logger = logging.getLogger(__name__)

ERROR_MESSAGES = {
    'create': "커뮤니티 댓글 생성에 실패하였습니다.",
    'update': "커뮤니티 댓글 수정에 실패하였습니다.",
    'delete': "커뮤니티 댓글 삭제에 실패하였습니다.",
    'toggle_like': "댓글 좋아요 기능 처리에 실패하였습니다.",
    'read': "커뮤니티 댓글 조회에 실패하였습니다.",
    'read_all': "해당 게시글의 모든 댓글을 불러오는데 실패하였습니다.",
    'reconcile': "게시글의 댓글 목록 정리에 실패하였습니다.",
}

DELETE_SUCCESS_MESSAGE = "댓글이 정상적으로 삭제되었습니다."

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class CommentService:
    """
    커뮤니티 댓글 관련 비즈니스 로직을 담당하는 서비스 클래스.
    - 댓글 CRUD, 좋아요 토글을 처리합니다.
    - 게시글 문서의 comment_ids 배열과 댓글 컬렉션을 같은 트랜잭션 안에서 함께 갱신합니다.
    """
    def __init__(self, store: Optional[DocumentStore] = None,
                 comments_collection: str = 'comments', posts_collection: str = 'posts'):
        self.store = store or DocumentStore()
        self.comments_collection = comments_collection
        self.posts_collection = posts_collection

    def create_comment(self, post_id: str, user_id: str, name: str, profile_image: str,
                       checked_badge: str, comment: str) -> Dict[str, Any]:
        """새 댓글을 저장하고 게시글의 comment_ids 배열에 댓글 ID를 추가합니다."""
        new_comment = Comment(
            comment_id=str(uuid.uuid4()),
            post_id=post_id,
            user_id=user_id,
            name=name,
            profile_image=profile_image,
            checked_badge=checked_badge,
            comment=comment
        )

        def _create_in_transaction(tx):
            post = tx.get(self.posts_collection, post_id)
            if post is None:
                raise NotFoundError("게시글을 찾을 수 없습니다.")

            comment_data = asdict(new_comment)
            comment_ids = list(post.get('comment_ids') or [])
            comment_ids.append(new_comment.comment_id)

            tx.create(self.comments_collection, new_comment.comment_id, comment_data)
            tx.update(self.posts_collection, post_id, {'comment_ids': comment_ids})
            return comment_data

        try:
            created = self.store.run_transaction(_create_in_transaction)
            logger.info(f"댓글 생성 완료 (post_id: {post_id}, comment_id: {new_comment.comment_id})")
            return CommentSchema().dump(created)
        except Exception as e:
            raise_operation_error(ERROR_MESSAGES['create'], e)

    def update_comment(self, comment_id: str, comment: str, user_id: str) -> Dict[str, Any]:
        """댓글 본문을 수정합니다. 작성자 본인만 가능합니다."""
        def _update_in_transaction(tx):
            target = tx.get(self.comments_collection, comment_id)
            if target is None:
                raise NotFoundError("커뮤니티 댓글을 찾을 수 없습니다.")
            if target.get('user_id') != user_id:
                raise ForbiddenError("작성자만 댓글을 수정할 수 있습니다.")

            tx.update(self.comments_collection, comment_id, {'comment': comment})
            target['comment'] = comment
            return target

        try:
            updated = self.store.run_transaction(_update_in_transaction)
            return CommentSchema().dump(updated)
        except Exception as e:
            raise_operation_error(ERROR_MESSAGES['update'], e)

    def delete_comment(self, comment_id: str, user_id: str) -> str:
        """
        댓글을 삭제합니다. (작성자 본인만 가능)
        게시글의 comment_ids에서 먼저 제거한 뒤 댓글 문서를 지웁니다.
        """
        def _delete_in_transaction(tx):
            target = tx.get(self.comments_collection, comment_id)
            if target is None:
                raise NotFoundError("커뮤니티 댓글을 찾을 수 없습니다.")
            if target.get('user_id') != user_id:
                raise ForbiddenError("작성자만 댓글을 삭제할 수 있습니다.")

            post_id = target.get('post_id')
            post = tx.get(self.posts_collection, post_id)
            if post is None:
                raise NotFoundError("게시글을 찾을 수 없습니다.")

            comment_ids = [
                cid for cid in (post.get('comment_ids') or [])
                if str(cid) != str(comment_id)
            ]
            tx.update(self.posts_collection, post_id, {'comment_ids': comment_ids})
            tx.delete(self.comments_collection, comment_id)

        try:
            self.store.run_transaction(_delete_in_transaction)
            logger.info(f"댓글 삭제 완료 (comment_id: {comment_id})")
            return DELETE_SUCCESS_MESSAGE
        except Exception as e:
            raise_operation_error(ERROR_MESSAGES['delete'], e)

    def toggle_like(self, post_id: str, comment_id: str, user_id: str, name: str) -> Dict[str, Any]:
        """댓글 좋아요를 누르거나, 이미 누른 경우 취소합니다."""
        def _toggle_in_transaction(tx):
            if tx.get(self.posts_collection, post_id) is None:
                raise NotFoundError("게시글을 찾을 수 없습니다.")
            target = tx.get(self.comments_collection, comment_id)
            if target is None:
                raise NotFoundError("댓글을 찾을 수 없습니다.")

            like_ids = list(target.get('like_ids') or [])
            like_index = next(
                (i for i, like in enumerate(like_ids) if like.get('user_id') == user_id),
                None
            )
            if like_index is None:
                like_ids.append({'user_id': user_id, 'name': name})
            else:
                like_ids.pop(like_index)

            tx.update(self.comments_collection, comment_id, {'like_ids': like_ids})
            target['like_ids'] = like_ids
            return target

        try:
            updated = self.store.run_transaction(_toggle_in_transaction)
            return CommentSchema().dump(updated)
        except Exception as e:
            raise_operation_error(ERROR_MESSAGES['toggle_like'], e)

    def read_comment(self, comment_id: str) -> Dict[str, Any]:
        """댓글 하나를 좋아요 수(num_likes)와 함께 조회합니다."""
        try:
            comments = self.store.find_with_array_size(
                self.comments_collection,
                [('comment_id', '==', comment_id)],
                array_field='like_ids',
                as_field='num_likes'
            )
            if not comments:
                raise NotFoundError("커뮤니티 댓글을 찾을 수 없습니다.")
            return CommentSchema().dump(comments[0])
        except Exception as e:
            raise_operation_error(ERROR_MESSAGES['read'], e)

    def read_all_comments_of_post(self, post_id: str) -> List[Dict[str, Any]]:
        """게시글의 모든 댓글을 작성 순서대로, 좋아요 수와 함께 조회합니다."""
        try:
            comments = self.store.find_with_array_size(
                self.comments_collection,
                [('post_id', '==', post_id)],
                array_field='like_ids',
                as_field='num_likes',
                order_by='created_at'
            )
            return CommentSchema(many=True).dump(comments)
        except Exception as e:
            raise_operation_error(ERROR_MESSAGES['read_all'], e)

    def reconcile_post_comments(self, post_id: str) -> Dict[str, Any]:
        """
        게시글의 comment_ids 배열을 실제 댓글 컬렉션과 맞춥니다.
        - 이미 삭제된 댓글 ID는 제거합니다.
        - 이 게시글을 가리키지만 배열에 빠진 댓글은 작성 순서대로 뒤에 붙입니다.
        """
        def _reconcile_in_transaction(tx):
            post = tx.get(self.posts_collection, post_id)
            if post is None:
                raise NotFoundError("게시글을 찾을 수 없습니다.")

            comments = tx.find(self.comments_collection, [('post_id', '==', post_id)])
            comments.sort(key=lambda c: c.get('created_at') or _EPOCH)
            existing_ids = [str(c.get('comment_id')) for c in comments]

            current_ids = [str(cid) for cid in (post.get('comment_ids') or [])]
            kept = []
            for cid in current_ids:
                if cid in existing_ids and cid not in kept:
                    kept.append(cid)
            removed = [cid for cid in current_ids if cid not in existing_ids]
            added = [cid for cid in existing_ids if cid not in kept]
            comment_ids = kept + added

            if comment_ids != current_ids:
                tx.update(self.posts_collection, post_id, {'comment_ids': comment_ids})
            return {'post_id': post_id, 'comment_ids': comment_ids, 'removed': removed, 'added': added}

        try:
            result = self.store.run_transaction(_reconcile_in_transaction)
            if result['removed'] or result['added']:
                logger.warning(
                    f"게시글 댓글 목록 정리 (post_id: {post_id}, "
                    f"제거: {result['removed']}, 추가: {result['added']})"
                )
            return result
        except Exception as e:
            raise_operation_error(ERROR_MESSAGES['reconcile'], e)

