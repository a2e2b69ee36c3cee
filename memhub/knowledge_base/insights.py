# memhub/knowledge_base/insights.py
"""
LLM-derived insights over logged events: links between related events and
the daily activity summary.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from dateutil import parser as date_parser

from memhub.db.session import get_db_session
from memhub.models.event import Event
from memhub.models.project import Project
from memhub.services.generation_service import GenerationService, get_generation_service

logger = logging.getLogger(__name__)

CONNECTIONS_EVENT_LIMIT = 200
SUMMARY_SYSTEM_INSTRUCTION = "You are an AI project assistant."

CONNECTIONS_PROMPT = """Analyze the following list of events and identify semantic connections between them.
Ignore trivial connections. Focus on events that connect different times but same topic.

Events:
{events}

Return ONLY a JSON object in this format:
{{ "connections": [ {{ "source": "ID_A", "target": "ID_B", "reason": "topic" }} ] }}"""

DAILY_SUMMARY_PROMPT = """Analyze the following log of activities from yesterday for the project "{project}".

Events:
{events}

Generate a concise but informative summary of what was accomplished, any ideas generated, and important notes.
Start with "Yesterday's Activity Summary:"."""

# Stored timestamps are free-form ISO text (Z, numeric offsets, space separators).
# The SQL filter is widened by this margin and the exact day is checked after parsing.
_ISO_BOUND_FORMAT = "%Y-%m-%dT%H:%M:%S"
_PREFILTER_MARGIN = timedelta(days=1)


def parse_event_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a stored event timestamp to an aware UTC datetime. Naive values are taken as UTC."""
    if not value:
        return None
    try:
        parsed = date_parser.parse(value)
    except (ValueError, OverflowError) as e:
        logger.debug(f"Unparseable event timestamp {value!r}: {e}")
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class InsightsService:
    """Connections and summaries generated from the event log."""

    def __init__(self, generation_service: Optional[GenerationService] = None, session_factory=None):
        self._generation = generation_service
        self._session_factory = session_factory

    @property
    def generation(self) -> GenerationService:
        return self._generation or get_generation_service()

    def generate_connections(self, project: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Ask the chat provider which recent events are about the same topic.

        Returns:
            List of {"source", "target", "reason"} dicts; empty when fewer
            than two events exist or the answer has an unexpected shape

        Raises:
            ConfigurationError / GenerationError: provider call failed
        """
        with get_db_session(self._session_factory) as db:
            query = db.query(Event.id, Event.text).outerjoin(Project, Project.id == Event.project_id)
            if project:
                query = query.filter(Project.name == project)
            rows = query.order_by(Event.timestamp.desc()).limit(CONNECTIONS_EVENT_LIMIT).all()
            events = [(row.id, row.text) for row in rows]

        if len(events) < 2:
            return []

        events_list = "\n".join(f"ID: {event_id} | Text: {text}" for event_id, text in events)
        result = self.generation.generate_json(CONNECTIONS_PROMPT.format(events=events_list))

        if isinstance(result, list):
            connections = result
        elif isinstance(result, dict) and isinstance(result.get("connections"), list):
            connections = result["connections"]
        else:
            logger.warning(f"Unexpected connections payload: {str(result)[:200]!r}")
            return []

        logger.info(f"Found {len(connections)} connections across {len(events)} events")
        return [c for c in connections if isinstance(c, dict)]

    def generate_daily_summary(self, project: str, now: Optional[datetime] = None) -> Optional[Dict[str, Any]]:
        """
        Summarize yesterday's events of *project*.

        "Yesterday" is the previous UTC calendar day; event timestamps are
        compared as instants, whatever offset they were written with.

        Returns:
            A new summary event dict, or None when the project had no events
            yesterday. Storing it is left to the caller.
        """
        now = now or datetime.now(timezone.utc)
        now_utc = now.replace(tzinfo=timezone.utc) if now.tzinfo is None else now.astimezone(timezone.utc)
        end = now_utc.replace(hour=0, minute=0, second=0, microsecond=0)
        start = end - timedelta(days=1)
        logger.info(f"Generating summary for project: {project}")

        with get_db_session(self._session_factory) as db:
            rows = (
                db.query(Event.timestamp, Event.type, Event.text)
                .join(Project, Project.id == Event.project_id)
                .filter(Project.name == project)
                .filter(Event.timestamp >= (start - _PREFILTER_MARGIN).strftime(_ISO_BOUND_FORMAT))
                .filter(Event.timestamp < (end + _PREFILTER_MARGIN).strftime(_ISO_BOUND_FORMAT))
                .all()
            )

        dated = []
        for row in rows:
            instant = parse_event_timestamp(row.timestamp)
            if instant is not None and start <= instant < end:
                dated.append((instant, row.timestamp, row.type, row.text))
        dated.sort(key=lambda item: item[0])
        events = [(timestamp, event_type, text) for _, timestamp, event_type, text in dated]

        if not events:
            logger.info(f"No activity yesterday for project {project}")
            return None

        events_text = "\n".join(f"[{timestamp}] ({event_type}): {text}" for timestamp, event_type, text in events)
        summary_text = self.generation.generate_text(
            DAILY_SUMMARY_PROMPT.format(project=project, events=events_text),
            system_instruction=SUMMARY_SYSTEM_INSTRUCTION,
        )

        return {
            "id": str(uuid.uuid4()),
            "timestamp": now.isoformat(),
            "type": "summary",
            "text": summary_text,
            "project": project,
            "source": "ai",
        }


# Singleton instance
_insights_service: Optional[InsightsService] = None


def get_insights_service() -> InsightsService:
    """Get or create the singleton insights service."""
    global _insights_service
    if _insights_service is None:
        _insights_service = InsightsService()
    return _insights_service
