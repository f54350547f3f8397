"""IP utilities for Flask applications."""

from flask import request


def get_remote_address():
    """
    Get the remote address (IP) of the client.

    Proxy headers are checked first since the API normally runs behind a
    reverse proxy; the socket address is the fallback.

    Returns:
        str: The remote IP address
    """
    forwarded_for = request.headers.get('X-Forwarded-For')
    if forwarded_for:
        # The client is the first entry of the comma-separated chain
        return forwarded_for.split(',')[0].strip()

    real_ip = request.headers.get('X-Real-IP')
    if real_ip:
        return real_ip.strip()

    return request.remote_addr or '127.0.0.1'
