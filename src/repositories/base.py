"""Generic SQLAlchemy scaffold for keyed document reads and atomic batches."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import inspect, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from domain.errors import BatchCommitError, ConcurrentUpdateError, RecordNotFoundError
from domain.protocol import Collection, MutationOp, Record, RecordMutation
from models.base import Base

logger = logging.getLogger(__name__)


class SqlDocumentStore:
    """DocumentStore backed by one ORM model per collection.

    Every model carries ``id`` and ``version`` columns. ``commit_batch`` runs
    inside a single ``session.begin()`` block; an exception anywhere rolls
    the whole batch back.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        collection_models: Mapping[Collection, type[Any]],
    ) -> None:
        self.session_factory = session_factory
        self.collection_models = dict(collection_models)

    def ensure_schema(self, engine: Engine) -> None:
        """Create required tables and indexes when missing."""
        tables = [getattr(model, "__table__") for model in self.collection_models.values()]
        Base.metadata.create_all(bind=engine, tables=tables, checkfirst=True)

    def read_record(self, collection: Collection, record_id: str) -> Record | None:
        model = self._model_for(collection)
        with self.session_factory() as session:
            instance = session.get(model, record_id)
            if instance is None:
                return None
            return _instance_to_record(instance)

    def read_records(self, collection: Collection, record_ids: Sequence[str]) -> dict[str, Record]:
        """Bulk variant of ``read_record``; absent ids are simply left out."""
        if not record_ids:
            return {}
        model = self._model_for(collection)
        id_column = getattr(model, "id")
        with self.session_factory() as session:
            instances = session.execute(select(model).where(id_column.in_(record_ids))).scalars()
            return {instance.id: _instance_to_record(instance) for instance in instances}

    def commit_batch(self, mutations: Sequence[RecordMutation]) -> None:
        if not mutations:
            return

        try:
            with self.session_factory.begin() as session:
                for mutation in mutations:
                    if mutation.op is MutationOp.SET:
                        self._apply_set(session, mutation)
                    else:
                        self._apply_update(session, mutation)
        except (ConcurrentUpdateError, RecordNotFoundError) as exc:
            logger.warning("Batch of %d mutations rolled back: %s", len(mutations), exc)
            raise
        except SQLAlchemyError as exc:
            logger.error("Batch of %d mutations failed to commit: %s", len(mutations), exc)
            raise BatchCommitError(f"batch commit failed: {exc}") from exc

        logger.debug("Committed batch of %d mutations", len(mutations))

    def _model_for(self, collection: Collection) -> type[Any]:
        try:
            return self.collection_models[Collection(collection)]
        except KeyError as exc:
            available = ", ".join(sorted(key.value for key in self.collection_models))
            raise ValueError(
                f"Unsupported collection '{collection}'. Choose one of: {available}."
            ) from exc

    def _apply_set(self, session: Session, mutation: RecordMutation) -> None:
        model = self._model_for(mutation.collection)
        instance = session.get(model, mutation.record_id)
        if instance is None:
            session.add(model(id=mutation.record_id, version=1, **mutation.fields))
        else:
            if (
                mutation.expected_version is not None
                and instance.version != mutation.expected_version
            ):
                raise ConcurrentUpdateError(
                    Collection(mutation.collection).value,
                    mutation.record_id,
                    mutation.expected_version,
                )
            for key, value in mutation.fields.items():
                setattr(instance, key, value)
            instance.version = instance.version + 1
        session.flush()

    def _apply_update(self, session: Session, mutation: RecordMutation) -> None:
        model = self._model_for(mutation.collection)
        id_column = getattr(model, "id")
        version_column = getattr(model, "version")

        statement = update(model).where(id_column == mutation.record_id)
        if mutation.expected_version is not None:
            statement = statement.where(version_column == mutation.expected_version)
        statement = statement.values(**mutation.fields, version=version_column + 1)

        result = session.execute(statement, execution_options={"synchronize_session": False})
        if result.rowcount == 1:
            return

        exists = session.scalar(select(id_column).where(id_column == mutation.record_id))
        collection_name = Collection(mutation.collection).value
        if exists is None:
            raise RecordNotFoundError(collection_name, mutation.record_id)
        raise ConcurrentUpdateError(
            collection_name,
            mutation.record_id,
            mutation.expected_version if mutation.expected_version is not None else -1,
        )


def _instance_to_record(instance: Any) -> Record:
    mapper = inspect(instance).mapper
    return {attr.key: getattr(instance, attr.key) for attr in mapper.column_attrs}


__all__ = ["SqlDocumentStore"]
