"""
===========================================================================
database.py — Record Store (Locations, Queries, Conversations)
===========================================================================

PURPOSE:
    This file handles everything related to storing records.

    There is ONE interface (RecordStore) and TWO implementations:
    1. MemoryStorage — plain dictionaries, gone when the server stops.
                       This is the default: the app is a demo.
    2. SQLiteStorage — the same methods backed by a SQLite file, for when
                       you want history to survive a restart.

    The routes only ever talk to the interface, so swapping backends is a
    one-line change in config.json:
        {"storage": {"backend": "sqlite", "db_path": "data/geochat.db"}}

WHAT WE STORE:
    ┌──────────────────────┐
    │  locations           │  id, name, latitude, longitude, type,
    └──────────┬───────────┘  created_at
               │
               │  one location has many queries / conversations
               ▼
    ┌──────────────────────┐  ┌──────────────────────┐
    │  queries             │  │  conversations       │
    │  id, location_id,    │  │  id, location_id,    │
    │  prompt, extracted_  │  │  session_id,         │
    │  params, response,   │  │  created_at          │
    │  visualization_data, │  └──────────────────────┘
    │  created_at          │
    └──────────────────────┘

    NOTE: location_id is NOT checked by the store. Callers are expected
    to pass an id that exists.

USED BY:
    main.py, routes/*
===========================================================================
"""

import json
import logging
import os
import sqlite3
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional

from config_loader import config
from schemas import (
    Conversation, ConversationCreate, Location, LocationCreate, Query, QueryCreate
)

logger = logging.getLogger(__name__)


# ===========================================================================
# SECTION 1: Id generation
# ===========================================================================

class IdSequence:
    """
    Hands out 1, 2, 3, ... — one sequence per record kind.

    A lock makes sure two requests creating records at the same time
    never get the same id.
    """

    def __init__(self, start: int = 1):
        self._next = start
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            value = self._next
            self._next += 1
            return value


# ===========================================================================
# SECTION 2: The interface
# ===========================================================================

class RecordStore(ABC):
    """Everything the routes need from a storage backend."""

    backend_name = "abstract"

    @abstractmethod
    def create_location(self, data: LocationCreate) -> Location: ...

    @abstractmethod
    def get_location(self, location_id: int) -> Optional[Location]: ...

    @abstractmethod
    def create_query(self, data: QueryCreate) -> Query: ...

    @abstractmethod
    def get_query(self, query_id: int) -> Optional[Query]: ...

    @abstractmethod
    def get_queries_by_location(self, location_id: int) -> List[Query]: ...

    @abstractmethod
    def create_conversation(self, data: ConversationCreate) -> Conversation: ...

    @abstractmethod
    def get_conversations_by_session(self, session_id: str) -> List[Conversation]: ...


# ===========================================================================
# SECTION 3: In-memory backend (default)
# ===========================================================================

def _copy(record):
    """Deep copy of a stored record (None passes through)."""
    return record.model_copy(deep=True) if record is not None else None


class MemoryStorage(RecordStore):
    """
    Dictionary-backed store.

    Callers always get a deep copy, so changing a returned record (or
    its params dict) never touches what is stored.

    Args:
        sequence_factory : Called once per record kind to make its id
                           sequence. Tests can pass their own.
        clock            : Returns the timestamp for new records.
    """

    backend_name = "memory"

    def __init__(self, sequence_factory=IdSequence, clock=datetime.now):
        self._clock = clock
        self._locations: Dict[int, Location] = {}
        self._queries: Dict[int, Query] = {}
        self._conversations: Dict[int, Conversation] = {}
        self._location_ids = sequence_factory()
        self._query_ids = sequence_factory()
        self._conversation_ids = sequence_factory()

    def create_location(self, data: LocationCreate) -> Location:
        location = Location(
            **data.model_dump(), id=self._location_ids.next(), created_at=self._clock()
        )
        self._locations[location.id] = location
        return _copy(location)

    def get_location(self, location_id: int) -> Optional[Location]:
        return _copy(self._locations.get(location_id))

    def create_query(self, data: QueryCreate) -> Query:
        data = data.model_copy(deep=True)
        query = Query(
            location_id=data.location_id,
            prompt=data.prompt,
            extracted_params=dict(data.extracted_params),
            response=data.response,
            visualization_data=data.visualization_data,
            id=self._query_ids.next(),
            created_at=self._clock()
        )
        self._queries[query.id] = query
        return _copy(query)

    def get_query(self, query_id: int) -> Optional[Query]:
        return _copy(self._queries.get(query_id))

    def get_queries_by_location(self, location_id: int) -> List[Query]:
        return [_copy(q) for q in self._queries.values() if q.location_id == location_id]

    def create_conversation(self, data: ConversationCreate) -> Conversation:
        conversation = Conversation(
            **data.model_dump(), id=self._conversation_ids.next(), created_at=self._clock()
        )
        self._conversations[conversation.id] = conversation
        return _copy(conversation)

    def get_conversations_by_session(self, session_id: str) -> List[Conversation]:
        return [_copy(c) for c in self._conversations.values() if c.session_id == session_id]


# ===========================================================================
# SECTION 4: SQLite backend
# ===========================================================================

class SQLiteStorage(RecordStore):
    """
    The same store on a SQLite file.

    A fresh connection is opened for every call and closed when the call
    is done. Ids come from SQLite's AUTOINCREMENT, which never reuses a
    value.
    """

    backend_name = "sqlite"

    def __init__(self, db_path: str, clock=datetime.now):
        self.db_path = db_path
        self._clock = clock
        directory = os.path.dirname(db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        self.init_db()

    def get_db_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self):
        """Create the tables if they don't exist yet."""
        conn = self.get_db_connection()
        try:
            self._create_tables(conn.cursor())
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _create_tables(c):
        c.execute('''
            CREATE TABLE IF NOT EXISTS locations (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                latitude TEXT,
                longitude TEXT,
                type TEXT NOT NULL,
                created_at TIMESTAMP
            )
        ''')
        c.execute('''
            CREATE TABLE IF NOT EXISTS queries (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                location_id INTEGER NOT NULL,
                prompt TEXT NOT NULL,
                extracted_params TEXT,      -- JSON object
                response TEXT,
                visualization_data TEXT,    -- JSON object or NULL
                created_at TIMESTAMP,
                FOREIGN KEY(location_id) REFERENCES locations(id)
            )
        ''')
        c.execute('''
            CREATE TABLE IF NOT EXISTS conversations (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                location_id INTEGER NOT NULL,
                session_id TEXT NOT NULL,
                created_at TIMESTAMP,
                FOREIGN KEY(location_id) REFERENCES locations(id)
            )
        ''')

    def _insert(self, sql: str, values: tuple) -> int:
        conn = self.get_db_connection()
        try:
            c = conn.cursor()
            c.execute(sql, values)
            conn.commit()
            return c.lastrowid
        finally:
            conn.close()

    def _fetch(self, sql: str, values: tuple) -> List[sqlite3.Row]:
        conn = self.get_db_connection()
        try:
            return conn.execute(sql, values).fetchall()
        finally:
            conn.close()

    # --- rows → records ---------------------------------------------------

    @staticmethod
    def _location_from_row(r) -> Location:
        return Location(
            id=r["id"], name=r["name"], latitude=r["latitude"],
            longitude=r["longitude"], type=r["type"],
            created_at=datetime.fromisoformat(r["created_at"])
        )

    @staticmethod
    def _query_from_row(r) -> Query:
        return Query(
            id=r["id"],
            location_id=r["location_id"],
            prompt=r["prompt"],
            extracted_params=json.loads(r["extracted_params"] or "{}"),
            response=r["response"],
            visualization_data=(
                json.loads(r["visualization_data"]) if r["visualization_data"] else None
            ),
            created_at=datetime.fromisoformat(r["created_at"])
        )

    @staticmethod
    def _conversation_from_row(r) -> Conversation:
        return Conversation(
            id=r["id"], location_id=r["location_id"], session_id=r["session_id"],
            created_at=datetime.fromisoformat(r["created_at"])
        )

    # --- RecordStore ------------------------------------------------------

    def create_location(self, data: LocationCreate) -> Location:
        created_at = self._clock()
        new_id = self._insert(
            "INSERT INTO locations (name, latitude, longitude, type, created_at) "
            "VALUES (?, ?, ?, ?, ?)",
            (data.name, data.latitude, data.longitude, data.type, created_at.isoformat())
        )
        return Location(**data.model_dump(), id=new_id, created_at=created_at)

    def get_location(self, location_id: int) -> Optional[Location]:
        rows = self._fetch("SELECT * FROM locations WHERE id = ?", (location_id,))
        return self._location_from_row(rows[0]) if rows else None

    def create_query(self, data: QueryCreate) -> Query:
        created_at = self._clock()
        chart = data.visualization_data
        new_id = self._insert(
            "INSERT INTO queries (location_id, prompt, extracted_params, response, "
            "visualization_data, created_at) VALUES (?, ?, ?, ?, ?, ?)",
            (
                data.location_id,
                data.prompt,
                json.dumps(data.extracted_params),
                data.response,
                chart.model_dump_json() if chart else None,
                created_at.isoformat()
            )
        )
        return Query(**data.model_dump(), id=new_id, created_at=created_at)

    def get_query(self, query_id: int) -> Optional[Query]:
        rows = self._fetch("SELECT * FROM queries WHERE id = ?", (query_id,))
        return self._query_from_row(rows[0]) if rows else None

    def get_queries_by_location(self, location_id: int) -> List[Query]:
        rows = self._fetch(
            "SELECT * FROM queries WHERE location_id = ? ORDER BY id ASC", (location_id,)
        )
        return [self._query_from_row(r) for r in rows]

    def create_conversation(self, data: ConversationCreate) -> Conversation:
        created_at = self._clock()
        new_id = self._insert(
            "INSERT INTO conversations (location_id, session_id, created_at) VALUES (?, ?, ?)",
            (data.location_id, data.session_id, created_at.isoformat())
        )
        return Conversation(**data.model_dump(), id=new_id, created_at=created_at)

    def get_conversations_by_session(self, session_id: str) -> List[Conversation]:
        rows = self._fetch(
            "SELECT * FROM conversations WHERE session_id = ? ORDER BY id ASC", (session_id,)
        )
        return [self._conversation_from_row(r) for r in rows]


# ===========================================================================
# SECTION 5: Picking a backend
# ===========================================================================

def create_storage(settings: dict) -> RecordStore:
    """
    Build the store described by the "storage" section of the config.

    Raises:
        ValueError: for a backend name we don't know.
    """
    storage_settings = settings.get("storage", {})
    backend = storage_settings.get("backend", "memory")

    if backend == "memory":
        return MemoryStorage()
    if backend == "sqlite":
        db_path = storage_settings.get("db_path", "data/geochat.db")
        logger.info("Using SQLite storage at %s", db_path)
        return SQLiteStorage(db_path)

    raise ValueError(f"Unknown storage backend: {backend!r}")


# ---------------------------------------------------------------------------
# One shared store for the whole app, created when this module is imported
# ---------------------------------------------------------------------------
storage = create_storage(config)


def get_storage() -> RecordStore:
    """FastAPI dependency. Tests swap it out via app.dependency_overrides."""
    return storage
