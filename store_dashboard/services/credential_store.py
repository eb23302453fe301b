import logging
from typing import Iterable, List, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session, sessionmaker

from store_dashboard.exceptions import ConfigurationError
from store_dashboard.models.database import SessionLocal, StoreConnection, create_tables
from store_dashboard.models.schemas import ConnectedStore, StoreCredential
from store_dashboard.utils.helpers import normalize_store_url

logger = logging.getLogger(__name__)


class CredentialStore:
    """
    Persistent list of connected store credentials

    Entries keep their insertion order. The same url may be connected more
    than once; remove() drops every entry for that url.
    """

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory or SessionLocal
        # Ensure tables exist
        create_tables(bind=self.session_factory.kw.get("bind"))

    def get_session(self) -> Session:
        """Get database session"""
        return self.session_factory()

    def load(self) -> List[StoreCredential]:
        """Load all connected stores in the order they were connected"""
        db = self.get_session()
        try:
            rows = db.query(StoreConnection).order_by(StoreConnection.id).all()
            try:
                return [StoreCredential(url=row.url, access_token=row.access_token) for row in rows]
            except ValidationError as e:
                raise ConfigurationError(f"Stored credentials are invalid: {e.errors()[0]['msg']}")
        finally:
            db.close()

    def list_connections(self) -> List[ConnectedStore]:
        """Connected stores with their connection time"""
        db = self.get_session()
        try:
            rows = db.query(StoreConnection).order_by(StoreConnection.id).all()
            return [
                ConnectedStore(url=row.url, access_token=row.access_token, connected_at=row.created_at)
                for row in rows
            ]
        finally:
            db.close()

    def save(self, credentials: Iterable[StoreCredential]) -> int:
        """
        Replace the whole list of connected stores

        Returns:
            int: Number of stores saved
        """
        db = self.get_session()
        try:
            db.query(StoreConnection).delete()
            count = self._insert(db, credentials)
            db.commit()
            logger.info(f"Saved {count} connected stores")
            return count
        except Exception as e:
            db.rollback()
            logger.error(f"Error saving connected stores: {e}")
            raise
        finally:
            db.close()

    def add(self, credentials: Iterable[StoreCredential]) -> int:
        """Append stores to the connected list"""
        db = self.get_session()
        try:
            count = self._insert(db, credentials)
            db.commit()
            logger.info(f"Connected {count} stores")
            return count
        except Exception as e:
            db.rollback()
            logger.error(f"Error connecting stores: {e}")
            raise
        finally:
            db.close()

    def remove(self, store_url: str) -> int:
        """
        Disconnect a store

        Returns:
            int: Number of entries removed (0 if the store was not connected)
        """
        host = normalize_store_url(store_url)
        db = self.get_session()
        try:
            # Entries keep the url as entered, so match on the store host
            rows = [row for row in db.query(StoreConnection).all() if normalize_store_url(row.url) == host]
            for row in rows:
                db.delete(row)
            db.commit()
            removed = len(rows)
            logger.info(f"Disconnected {host} ({removed} entries)")
            return removed
        except Exception as e:
            db.rollback()
            logger.error(f"Error disconnecting store {host}: {e}")
            raise
        finally:
            db.close()

    def _insert(self, db: Session, credentials: Iterable[StoreCredential]) -> int:
        count = 0
        for credential in credentials:
            db.add(StoreConnection(url=credential.url, access_token=credential.access_token))
            count += 1
        return count
