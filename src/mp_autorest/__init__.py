"""
mp_autorest – composable async HTTP request pipeline.

Import path convention::

    from mp_autorest.http import prepare, send_with_sender, respond
    from mp_autorest.http.sender import do_retry_for_attempts
    from mp_autorest.http.polling import poll_for_attempts
    from mp_autorest.azure import with_error_unless_status_code
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
