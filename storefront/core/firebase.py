import firebase_admin
from firebase_admin import credentials, auth, firestore
from storefront.core.config import settings
import logging

logger = logging.getLogger(__name__)


def init_firebase():
    """
    Initialize the Firebase Admin app once per process.
    Used for merchant ID-token verification and the Firestore analytics log.
    """
    if firebase_admin._apps:
        logger.debug("init_firebase: Already initialized")
        return

    logger.info(f"init_firebase: Entry - project: {settings.firebase_project_id}")
    try:
        cred = credentials.Certificate(settings.firebase_credentials_path)
        firebase_admin.initialize_app(cred, {'projectId': settings.firebase_project_id})
        logger.info("init_firebase: Success")
    except Exception as e:
        logger.error(f"init_firebase: Failure - {e}")
        raise


def verify_merchant_token(token: str) -> dict:
    """Decode a merchant's Firebase ID token; raises on invalid, expired or revoked tokens"""
    decoded = auth.verify_id_token(token, check_revoked=settings.firebase_check_revoked)
    logger.debug(f"verify_merchant_token: Success - {decoded.get('uid')}")
    return decoded


def get_firestore_client():
    return firestore.client()
