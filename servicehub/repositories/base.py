"""기본 CRUD 레포지토리 — 모든 레포지토리의 부모 클래스.

Base CRUD Repository — Parent class for all domain repositories.
Provides generic get and insert operations plus a conditional
update used for optimistic state transitions.

Usage:
    class PaymentRepository(BaseRepository[Payment]):
        def __init__(self) -> None:
            super().__init__(Payment)
"""

from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import Select, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from servicehub.database import Base

# 제네릭 타입 변수 — SQLAlchemy 모델을 나타냄
# Generic type variable representing a SQLAlchemy model
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """제네릭 CRUD 레포지토리.

    Generic CRUD repository providing common database operations.
    Repositories hold no business rules; services decide, repositories store.

    Attributes:
        model: SQLAlchemy 모델 클래스 (The SQLAlchemy model class)
    """

    def __init__(self, model: type[ModelType]) -> None:
        """레포지토리를 초기화합니다.

        Initialize the repository with a model class.

        Args:
            model: 이 레포지토리가 관리할 SQLAlchemy 모델 클래스
                   (SQLAlchemy model class this repository manages)
        """
        self.model: type[ModelType] = model

    async def get_by_id(
        self,
        db: AsyncSession,
        record_id: UUID,
    ) -> ModelType | None:
        """ID로 단일 레코드를 조회합니다.

        Retrieve a single record by its UUID. The row is always re-read from
        the database so callers never decide on a stale identity-map copy.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            record_id: 조회할 레코드의 UUID (UUID of the record to retrieve)

        Returns:
            ModelType | None: 조회된 레코드 또는 None (Found record or None)
        """
        query: Select = (
            select(self.model)
            .where(self.model.id == record_id)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def create(
        self,
        db: AsyncSession,
        obj_data: dict[str, Any],
    ) -> ModelType:
        """새 레코드를 생성합니다.

        Create a new record in the database.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            obj_data: 생성할 레코드의 데이터 딕셔너리
                      (Dictionary of data for the new record)

        Returns:
            ModelType: 생성된 레코드 (The created record)
        """
        db_obj: ModelType = self.model(**obj_data)
        db.add(db_obj)
        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def update_if(
        self,
        db: AsyncSession,
        record_id: UUID,
        expected: dict[str, Any],
        values: dict[str, Any],
    ) -> bool:
        """현재 값이 기대값과 일치할 때만 레코드를 업데이트합니다 (CAS).

        Conditionally update a record: the UPDATE only matches when every
        column in ``expected`` still holds the given value. A ``None`` value
        in ``expected`` means ``IS NULL``.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            record_id: 대상 레코드 UUID (Target record UUID)
            expected: 사전 조건 {'컬럼명': 기대값} (Preconditions {'column': expected value})
            values: 설정할 값 (Values to write)

        Returns:
            bool: 정확히 한 행이 갱신되었는지 여부 (True if exactly one row was updated)
        """
        stmt = update(self.model).where(self.model.id == record_id)
        for column_name, value in expected.items():
            column = getattr(self.model, column_name)
            stmt = stmt.where(column.is_(None) if value is None else column == value)
        stmt = stmt.values(**values).execution_options(synchronize_session=False)

        result = await db.execute(stmt)
        return result.rowcount == 1

