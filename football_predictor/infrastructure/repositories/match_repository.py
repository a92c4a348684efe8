import logging
import json
from datetime import datetime
from typing import Any, Callable, List, Optional, Union

from sqlalchemy import Column, String, JSON, DateTime
from sqlalchemy.exc import SQLAlchemyError

from football_predictor.domain.entities.entities import EnrichedMatch
from football_predictor.infrastructure.database.database_service import Base, DatabaseService, get_database_service
from football_predictor.utils.time_utils import get_current_time, parse_datetime

logger = logging.getLogger(__name__)

MATCHES_STORAGE_KEY = "football_predictor_matches"
LAST_UPDATE_KEY = "football_predictor_last_update"


class StoredDataModel(Base):
    """
    SQLAlchemy model for the key-value match storage.
    """
    __tablename__ = "stored_data"

    key = Column(String, primary_key=True)
    data = Column(JSON, nullable=False)
    last_updated = Column(DateTime, nullable=False)


class MatchRepository:
    """
    Repository for the enriched matches of the last refresh.

    The match list and the refresh timestamp live under two fixed keys.
    Storage failures are logged and read as "nothing stored".
    """

    def __init__(
        self,
        db_service: Optional[DatabaseService] = None,
        clock: Callable[[], datetime] = get_current_time,
    ):
        self.db_service = db_service or get_database_service()
        self._clock = clock

    def create_tables(self):
        """Create all tables defined in Base."""
        self.db_service.create_tables()

    def _sanitize_json_data(self, data: Any) -> Any:
        """
        Sanitize data for JSON storage, handling datetime objects.
        """
        class DateTimeEncoder(json.JSONEncoder):
            def default(self, o):
                if isinstance(o, datetime):
                    return o.isoformat()
                return super().default(o)

        # Dump to string and reload to ensure pure JSON types (dict, list, str, int, float, bool, None)
        return json.loads(json.dumps(data, cls=DateTimeEncoder))

    def _upsert(self, session, key: str, data: Any, now: datetime) -> None:
        record = session.get(StoredDataModel, key)
        if record:
            record.data = data
            record.last_updated = now
        else:
            session.add(StoredDataModel(key=key, data=data, last_updated=now))

    def _read(self, key: str) -> Optional[Any]:
        session = self.db_service.get_session()
        try:
            record = session.get(StoredDataModel, key)
            return record.data if record else None
        except SQLAlchemyError as e:
            logger.error(f"Failed to read {key} from storage: {e}")
            return None
        finally:
            session.close()

    def save_matches(self, matches: List[Union[EnrichedMatch, dict]]) -> bool:
        """
        Replace the stored matches and stamp the update time.
        """
        records = [match.to_dict() if isinstance(match, EnrichedMatch) else match for match in matches]
        now = self._clock()

        session = self.db_service.get_session()
        try:
            self._upsert(session, MATCHES_STORAGE_KEY, self._sanitize_json_data(records), now)
            self._upsert(session, LAST_UPDATE_KEY, now.isoformat(), now)
            session.commit()
            logger.info(f"Saved {len(records)} matches to storage")
            return True
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Failed to save matches to storage: {e}")
            return False
        finally:
            session.close()

    def get_stored_matches(self) -> List[dict]:
        return self._read(MATCHES_STORAGE_KEY) or []

    def get_last_update_time(self) -> Optional[datetime]:
        return parse_datetime(self._read(LAST_UPDATE_KEY))

    def needs_update(self, max_age_seconds: int = 3600) -> bool:
        """True when nothing was stored yet or the last update is older than max_age_seconds."""
        last_update = self.get_last_update_time()
        if last_update is None:
            return True
        return (self._clock() - last_update).total_seconds() > max_age_seconds

    def clear_stored_data(self) -> bool:
        session = self.db_service.get_session()
        try:
            session.query(StoredDataModel).filter(
                StoredDataModel.key.in_([MATCHES_STORAGE_KEY, LAST_UPDATE_KEY])
            ).delete(synchronize_session=False)
            session.commit()
            logger.info("Cleared stored data")
            return True
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Failed to clear stored data: {e}")
            return False
        finally:
            session.close()
