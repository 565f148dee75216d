"""
Web module for the imposition service
"""

from .utils import (
    allowed_file,
    validate_uploaded_file,
    update_progress,
    save_uploaded_sources,
    session_source_paths,
    config_from_request,
    cleanup_session,
    progress_store,
    cleanup_old_sessions
)
from .background_tasks import start_background_processing
from .routes import configure_routes

__all__ = [
    'allowed_file',
    'validate_uploaded_file',
    'update_progress',
    'save_uploaded_sources',
    'session_source_paths',
    'config_from_request',
    'cleanup_session',
    'progress_store',
    'cleanup_old_sessions',
    'start_background_processing',
    'configure_routes'
]
