import logging
from datetime import datetime
from storefront.core.config import settings
from storefront.core.firebase import get_firestore_client

logger = logging.getLogger(__name__)


class AnalyticsService:
    def __init__(self):
        # Firebase Admin SDK; disabled in tests and local runs without Firestore
        self.enabled = settings.analytics_enabled
        self.db = get_firestore_client() if self.enabled else None
        self.analytics_collection = 'analytics_events'
        self.errors_collection = 'service_errors'
        self.logger = logging.getLogger(__name__)

    def log_event(
        self,
        event_name: str,
        user_id: str = None,
        parameters: dict = None,
    ):
        """
        Log analytics event to Firestore.
        Used for plan usage, upgrade prompts and checkout quote metrics.
        """
        if not self.enabled:
            return

        try:
            event_data = {
                'event_name': event_name,
                'user_id': user_id,
                'parameters': parameters or {},
                'timestamp': datetime.utcnow()
            }
            self.db.collection(self.analytics_collection).add(event_data)
        except Exception as e:
            # Analytics failures should not break main functionality
            logger.error(f"log_event: Failure - {e}")

    def log_error(
        self,
        error: str,
        action: str,
        user_id: str = None,
        parameters: dict = None,
    ):
        """Record a handled service error for monitoring."""
        if not self.enabled:
            return

        try:
            error_data = {
                'action': action,
                'user_id': user_id,
                'error_message': error,
                'parameters': parameters or {},
                'timestamp': datetime.utcnow()
            }
            self.db.collection(self.errors_collection).add(error_data)
        except Exception as e:
            logger.error(f"log_error: Failure - {e}")

    def log_success(
        self,
        action: str,
        user_id: str = None,
        parameters: dict = None
    ):
        self.log_event(
            event_name=f'{action}_success',
            user_id=user_id,
            parameters={
                'status': 'success',
                **(parameters or {})
            }
        )

    def log_failure(
        self,
        action: str,
        error: str,
        user_id: str = None,
        parameters: dict = None
    ):
        """
        Log failed action to both the event log (failure rate metrics)
        and the error collection (debugging).
        """
        self.log_event(
            event_name=f'{action}_failure',
            user_id=user_id,
            parameters={
                'status': 'failure',
                'error': error,
                **(parameters or {})
            }
        )
        self.log_error(
            error=error,
            action=action,
            user_id=user_id,
            parameters=parameters
        )
