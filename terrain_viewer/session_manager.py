from typing import Any, Generic, Type, TypeVar
from typing_extensions import Protocol
from pydantic import BaseModel
from contextlib import contextmanager

T = TypeVar("T", bound=BaseModel)


class SessionStore(Protocol):
    """Key/value store scoped to one user, such as ``cl.user_session``."""

    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...


class SessionManager(Generic[T]):
    def __init__(self, model_cls: Type[T], store: SessionStore, key: str = "state") -> None:
        self._store = store
        self._key = key
        stored_data = store.get(key) or {}
        self._model: T = model_cls(**stored_data)
        self.sync()

    def sync(self) -> None:
        """Sync current model state to session"""
        self._store.set(self._key, self._model.model_dump())

    @contextmanager
    def batch_update(self):
        """Context manager for batching multiple updates"""
        try:
            yield self._model
        finally:
            self.sync()

    def update(self, **kwargs) -> None:
        """Update multiple attributes on the underlying model"""
        with self.batch_update() as model:
            for key, value in kwargs.items():
                setattr(model, key, value)

    @property
    def model(self) -> T:
        """Access to the underlying model instance"""
        return self._model
