from fastapi import Request
from student_api.storage.base import Storage


def get_storage(request: Request) -> Storage:
    """
    Dependency returning the storage the app was built with.
    The same instance is shared by every request.
    """
    return request.app.state.storage
