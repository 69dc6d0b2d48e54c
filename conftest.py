# conftest.py
"""
공용 pytest 픽스처

- fake_db: Firestore 클라이언트를 대신하는 인메모리 저장소 (서비스에 db로 주입)
- app / client: 테스트 설정으로 생성한 Flask 앱과 테스트 클라이언트
- add_user / auth_headers: 사용자 문서 생성과 JWT 인증 헤더 헬퍼
"""

import copy
import uuid

import pytest
from flask_jwt_extended import create_access_token
from google.api_core.exceptions import NotFound

from flavorworld import create_app
from flavorworld.utils.datetime_utils import DateTimeUtils


def _get_field(data, path):
    value = data
    for part in path.split('.'):
        if not isinstance(value, dict) or part not in value:
            return None
        value = value[part]
    return value


def _matches(data, field_path, op, value):
    actual = _get_field(data, field_path)
    if op == '==':
        return actual == value
    if op == '!=':
        return actual != value
    if op == 'in':
        return actual in value
    if op == 'array_contains':
        return isinstance(actual, list) and value in actual
    if op == 'array_contains_any':
        return isinstance(actual, list) and any(v in actual for v in value)
    if actual is None:
        return False
    if op == '<':
        return actual < value
    if op == '<=':
        return actual <= value
    if op == '>':
        return actual > value
    if op == '>=':
        return actual >= value
    raise ValueError(f"지원하지 않는 연산자: {op}")


class FakeSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeDocumentReference:
    def __init__(self, collection, doc_id):
        self._collection = collection
        self.id = doc_id

    def get(self):
        return FakeSnapshot(self, self._collection._docs.get(self.id))

    def set(self, data, merge=False):
        if merge and self.id in self._collection._docs:
            self._collection._docs[self.id].update(copy.deepcopy(data))
        else:
            self._collection._docs[self.id] = copy.deepcopy(data)

    def update(self, data):
        if self.id not in self._collection._docs:
            raise NotFound(f"No document to update: {self._collection.name}/{self.id}")
        self._collection._docs[self.id].update(copy.deepcopy(data))

    def delete(self):
        self._collection._docs.pop(self.id, None)


class FakeQuery:
    def __init__(self, collection, filters=(), orders=(), limit_count=None):
        self._collection = collection
        self._filters = tuple(filters)
        self._orders = tuple(orders)
        self._limit = limit_count

    def where(self, field_path, op, value):
        return FakeQuery(self._collection, self._filters + ((field_path, op, value),), self._orders, self._limit)

    def order_by(self, field_path, direction='ASCENDING'):
        return FakeQuery(self._collection, self._filters, self._orders + ((field_path, direction),), self._limit)

    def limit(self, count):
        return FakeQuery(self._collection, self._filters, self._orders, count)

    def stream(self):
        items = [(doc_id, data) for doc_id, data in self._collection._docs.items()
                 if all(_matches(data, *f) for f in self._filters)]
        for field_path, direction in reversed(self._orders):
            # Firestore는 정렬 필드가 없는 문서를 결과에서 제외
            items = [item for item in items if _get_field(item[1], field_path) is not None]
            items.sort(key=lambda item: _get_field(item[1], field_path), reverse=(direction == 'DESCENDING'))
        if self._limit is not None:
            items = items[:self._limit]
        for doc_id, _ in items:
            ref = FakeDocumentReference(self._collection, doc_id)
            yield ref.get()

    def get(self):
        return list(self.stream())


class FakeCollection(FakeQuery):
    def __init__(self, name):
        self.name = name
        self._docs = {}
        super().__init__(self)

    def document(self, doc_id=None):
        return FakeDocumentReference(self, doc_id or uuid.uuid4().hex)


class FakeFirestore:
    """테스트에 필요한 Firestore 클라이언트 API의 부분 집합을 메모리에서 구현합니다."""

    def __init__(self):
        self._collections = {}

    def collection(self, name):
        if name not in self._collections:
            self._collections[name] = FakeCollection(name)
        return self._collections[name]

    def docs(self, name):
        """테스트 검증용: 컬렉션의 모든 문서 데이터"""
        return [copy.deepcopy(data) for data in self.collection(name)._docs.values()]


@pytest.fixture
def fake_db():
    return FakeFirestore()


@pytest.fixture
def app(fake_db):
    return create_app('testing', db=fake_db)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def add_user(fake_db):
    """users 컬렉션에 사용자 문서를 직접 추가합니다."""
    def _add_user(user_id, full_name=None, **fields):
        user = {
            'user_id': user_id,
            'email': f'{user_id}@flavorworld.test',
            'full_name': full_name or user_id.capitalize(),
            'password_hash': '',
            'bio': None,
            'avatar': None,
            'followers': [],
            'following': [],
            'saved_recipes': [],
            'created_at': DateTimeUtils.now(),
        }
        user.update(fields)
        fake_db.collection('users').document(user_id).set(user)
        return user
    return _add_user


@pytest.fixture
def auth_headers(app):
    """사용자 ID로 Access Token을 만들어 Authorization 헤더를 반환합니다."""
    def _auth_headers(user_id):
        with app.app_context():
            token = create_access_token(identity=user_id)
        return {'Authorization': f'Bearer {token}'}
    return _auth_headers


@pytest.fixture
def recipe_payload():
    """레시피 생성 요청 본문 (클라이언트 형식: meatType, prepTime)"""
    return {
        'title': 'Kimchi Fried Rice',
        'description': 'Quick weeknight dinner',
        'ingredients': 'rice, kimchi, egg',
        'instructions': 'Fry everything together',
        'category': 'Korean',
        'meatType': 'Pork',
        'prepTime': 20,
        'servings': 2,
    }
