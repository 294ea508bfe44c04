# receipt_desk/api/deps.py

from fastapi import Request

from receipt_desk.db.storage import Storage


def get_storage(request: Request) -> Storage:
    """The single Storage built by ``create_app``."""
    return request.app.state.storage
