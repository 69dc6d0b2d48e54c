# flavorworld/feed/mutations.py
"""
좋아요/댓글 상태 전이를 계산하는 순수 함수 모음.
서버(RecipeService)와 클라이언트의 낙관적 업데이트(FeedSession)가 같은 규칙을 공유합니다.
입력 목록은 변경하지 않고 항상 새 목록을 반환합니다.
"""
from typing import Any, Dict, List, Optional, Sequence, Tuple


def toggle_like(likes: Optional[Sequence[str]], user_id: str) -> Tuple[List[str], bool]:
    """
    현재 좋아요 상태를 뒤집습니다.
    :return: (새 좋아요 목록, 토글 후 좋아요 상태)
    """
    current = list(likes or [])
    if user_id in current:
        return [uid for uid in current if uid != user_id], False
    return current + [user_id], True


def add_like(likes: Optional[Sequence[str]], user_id: str) -> List[str]:
    current = list(likes or [])
    return current if user_id in current else current + [user_id]


def remove_like(likes: Optional[Sequence[str]], user_id: str) -> List[str]:
    return [uid for uid in (likes or []) if uid != user_id]


def append_comment(comments: Optional[Sequence[Dict[str, Any]]], comment: Dict[str, Any]) -> List[Dict[str, Any]]:
    """새 댓글을 맨 뒤에 추가합니다. 기존 댓글의 순서는 바뀌지 않습니다."""
    return list(comments or []) + [comment]


def find_comment(comments: Optional[Sequence[Dict[str, Any]]], comment_id: str) -> Optional[Dict[str, Any]]:
    for comment in comments or []:
        if comment.get('comment_id') == comment_id:
            return comment
    return None


def remove_comment(comments: Optional[Sequence[Dict[str, Any]]], comment_id: str, user_id: str) -> List[Dict[str, Any]]:
    """
    작성자 본인의 댓글만 삭제합니다.
    :raises ValueError: 해당 ID의 댓글이 없는 경우
    :raises PermissionError: 요청자가 댓글 작성자가 아닌 경우
    """
    comment = find_comment(comments, comment_id)
    if comment is None:
        raise ValueError("삭제할 댓글을 찾을 수 없습니다.")
    if comment.get('user_id') != user_id:
        raise PermissionError("댓글을 삭제할 권한이 없습니다.")
    return [c for c in comments if c.get('comment_id') != comment_id]
