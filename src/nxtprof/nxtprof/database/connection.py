from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from google.cloud import firestore


@dataclass
class FirestoreConfig:
    project: Optional[str]
    database: str = "(default)"
    emulator_host: Optional[str] = None


class DatabaseConnection:
    """Owns the Firestore client for one process.

    Note: Built once by the container and injected into every repository;
    there is no module-level client.
    """

    def __init__(self, config: FirestoreConfig):
        self._config = config
        self._client: Optional[firestore.Client] = None

    @property
    def config(self) -> FirestoreConfig:
        return self._config

    def client(self) -> firestore.Client:
        if self._client is None:
            if self._config.emulator_host:
                os.environ.setdefault("FIRESTORE_EMULATOR_HOST", self._config.emulator_host)
            self._client = firestore.Client(project=self._config.project, database=self._config.database)
        return self._client
