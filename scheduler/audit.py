"""
Audit Logging for Accounts and Events

Every change to an account or event (create, approve, delete), every
authentication attempt and every denied action is written to a dedicated
audit log with timestamp, acting user and operation details.

Usage:
    from scheduler.audit import audit_log_create, audit_log_update, audit_log_delete

    # For new records
    audit_log_create('Event', event.id, f'Created event: {event.title}')

    # For updates
    audit_log_update('Event', event.id, f'Approved event: {event.title}', {'approved': False})

    # For deletions
    audit_log_delete('Event', event_id, f'Deleted event: {title}')

Passwords and tokens must never be passed to these functions.
"""

import logging
import os
from typing import Optional, Dict, Any, Union
from flask import current_app, has_request_context
from flask_login import current_user


def setup_audit_logger():
    """Setup and configure the audit logger with proper formatting and file handling."""
    audit_logger = logging.getLogger('audit')
    audit_logger.setLevel(logging.INFO)

    # Prevent duplicate log entries
    if audit_logger.hasHandlers():
        return audit_logger

    log_dir = os.path.join(current_app.instance_path, 'logs')
    os.makedirs(log_dir, exist_ok=True)

    log_file = os.path.join(log_dir, 'audit.log')
    file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s | %(levelname)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    audit_logger.addHandler(file_handler)

    # Prevent propagation to root logger
    audit_logger.propagate = False

    return audit_logger


def get_current_user_info() -> str:
    """Get current user information for audit logging."""
    if has_request_context() and current_user.is_authenticated:
        return f"{current_user.username} (ID: {current_user.id})"
    return "ANONYMOUS"


def _format_extra(additional_data: Optional[Dict[str, Any]]) -> str:
    if not additional_data:
        return ''
    return ' | ' + ', '.join(f'{key}={value}' for key, value in sorted(additional_data.items()))


def audit_log_create(model_name: str, record_id: Union[int, str], description: str,
                     additional_data: Optional[Dict[str, Any]] = None):
    """
    Log record creation.

    Args:
        model_name: Name of the model (e.g., 'Account', 'Event')
        record_id: ID of the created record
        description: Human-readable description of the operation
        additional_data: Optional additional data to include in the log
    """
    logger = setup_audit_logger()
    user_info = get_current_user_info()

    logger.info(f"CREATE | {model_name} | ID: {record_id} | User: {user_info} | "
                f"{description}{_format_extra(additional_data)}")


def audit_log_update(model_name: str, record_id: Union[int, str], description: str,
                     changes: Optional[Dict[str, Any]] = None):
    """
    Log record updates.

    Args:
        model_name: Name of the model
        record_id: ID of the updated record
        description: Human-readable description of the operation
        changes: Optional dictionary of field changes {'field': 'old_value'}
    """
    logger = setup_audit_logger()
    user_info = get_current_user_info()

    logger.info(f"UPDATE | {model_name} | ID: {record_id} | User: {user_info} | "
                f"{description}{_format_extra(changes)}")


def audit_log_delete(model_name: str, record_id: Union[int, str], description: str):
    """Log record deletion."""
    logger = setup_audit_logger()
    user_info = get_current_user_info()

    logger.info(f"DELETE | {model_name} | ID: {record_id} | User: {user_info} | {description}")


def audit_log_authentication(event_type: str, username: str, success: bool):
    """
    Log authentication events.

    Args:
        event_type: Type of authentication event ('LOGIN', 'LOGOUT', 'REGISTER')
        username: Username involved in the event
        success: Whether the operation was successful
    """
    logger = setup_audit_logger()

    status = "SUCCESS" if success else "FAILURE"
    logger.info(f"AUTH | {event_type} | {status} | User: {username}")


def audit_log_security_event(event_type: str, description: str):
    """
    Log security-related events.

    Args:
        event_type: Type of security event ('ACCESS_DENIED', 'INVALID_TOKEN')
        description: Human-readable description of the event
    """
    logger = setup_audit_logger()
    user_info = get_current_user_info()

    logger.warning(f"SECURITY | {event_type} | User: {user_info} | {description}")


def audit_log_system_event(event_type: str, description: str):
    """Log system-level events such as bootstrap account creation."""
    logger = setup_audit_logger()

    logger.info(f"SYSTEM | {event_type} | {description}")
