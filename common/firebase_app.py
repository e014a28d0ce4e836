"""
Firebase Admin SDK application bootstrap.

Both the auth provider and the Realtime Database store need an initialized
firebase_admin app. This module owns that one-time initialization and the
credential lookup order:

1. An explicit service account file path
2. An explicit service account dict
3. Service account fields in environment variables (PROJECT_ID, PRIVATE_KEY, ...)
4. Application Default Credentials (GCP environments)

Example:
    from common.firebase_app import get_firebase_app

    app = get_firebase_app(
        credentials_path="serviceAccount.json",
        database_url="https://campverse-demo-default-rtdb.firebaseio.com",
    )
"""

import logging
import os
from typing import Dict, Any, Optional

import firebase_admin
from dotenv import load_dotenv
from firebase_admin import credentials

logger = logging.getLogger(__name__)

# Service account fields may live in .env alongside the app settings
load_dotenv()


def _get_firebase_credentials_from_env() -> Optional[Dict[str, Any]]:
    """
    Check if Firebase credentials are present in environment variables.
    Returns credentials dict if all required fields are present, None otherwise.
    """
    required_fields = [
        "PROJECT_ID",
        "PRIVATE_KEY",
        "CLIENT_EMAIL",
    ]

    for field in required_fields:
        if not os.environ.get(field):
            return None

    def _clean(name: str, default: str = "") -> str:
        return os.environ.get(name, default).strip('"').strip(",")

    return {
        "type": _clean("TYPE", "service_account"),
        "project_id": _clean("PROJECT_ID"),
        "private_key_id": _clean("PRIVATE_KEY_ID"),
        # Keys pasted into .env files usually carry escaped newlines
        "private_key": _clean("PRIVATE_KEY").replace("\\n", "\n"),
        "client_email": _clean("CLIENT_EMAIL"),
        "client_id": _clean("CLIENT_ID"),
        "auth_uri": _clean("AUTH_URI", "https://accounts.google.com/o/oauth2/auth"),
        "token_uri": _clean("TOKEN_URI", "https://oauth2.googleapis.com/token"),
        "auth_provider_x509_cert_url": _clean(
            "AUTH_PROVIDER_X509_CERT_URL", "https://www.googleapis.com/oauth2/v1/certs"
        ),
        "client_x509_cert_url": _clean("CLIENT_X509_CERT_URL"),
        "universe_domain": _clean("UNIVERSE_DOMAIN", "googleapis.com"),
    }


def get_firebase_app(
    credentials_path: Optional[str] = None,
    credentials_dict: Optional[Dict[str, Any]] = None,
    project_id: Optional[str] = None,
    database_url: Optional[str] = None,
) -> firebase_admin.App:
    """
    Return the default firebase_admin app, initializing it on first use.

    Args:
        credentials_path: Path to service account JSON file
        credentials_dict: Service account credentials as dict (alternative to path)
        project_id: Firebase project ID (optional, can be inferred from credentials)
        database_url: Realtime Database URL (required for RTDB access)

    Returns:
        The initialized firebase_admin.App
    """
    if firebase_admin._apps:
        return firebase_admin.get_app()

    if credentials_path:
        cred = credentials.Certificate(credentials_path)
    elif credentials_dict:
        cred = credentials.Certificate(credentials_dict)
    else:
        env_credentials = _get_firebase_credentials_from_env()
        if env_credentials:
            cred = credentials.Certificate(env_credentials)
        else:
            cred = credentials.ApplicationDefault()

    options: Dict[str, Any] = {}
    if project_id:
        options["projectId"] = project_id
    if database_url:
        options["databaseURL"] = database_url

    app = firebase_admin.initialize_app(cred, options)
    logger.info(f"Initialized Firebase app (project={project_id or 'from credentials'})")
    return app

