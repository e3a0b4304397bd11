"""
Centralized Firebase initialization module.
Returns the default Firebase app, creating it on first use in the process.
"""

import logging
import firebase_admin
from firebase_admin import credentials


def initialize_firebase():
    """
    Initialize the Firebase Admin SDK with application default credentials.
    Uses GOOGLE_APPLICATION_CREDENTIALS when set.

    Returns:
        firebase_admin.App: The default app

    Raises:
        Exception: Whatever the SDK raised; a process without Firebase cannot run.
    """
    try:
        app = firebase_admin.get_app()
        logging.info("Firebase Admin SDK already initialized.")
        return app
    except ValueError:
        pass

    try:
        app = firebase_admin.initialize_app(credentials.ApplicationDefault())
        logging.info("Firebase Admin SDK initialized successfully.")
        return app
    except Exception as e:
        logging.critical(f"Failed to initialize Firebase Admin SDK: {e}", exc_info=True)
        raise

# Export the initialization function
__all__ = ['initialize_firebase']
