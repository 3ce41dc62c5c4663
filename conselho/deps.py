# conselho/deps.py
from fastapi import Request

from conselho.store import JsonStore
from conselho.uploads import UploadStorage
from conselho.users import UserStore


def get_store(request: Request) -> JsonStore:
    return request.app.state.store


def get_users(request: Request) -> UserStore:
    return request.app.state.users


def get_uploads(request: Request) -> UploadStorage:
    return request.app.state.uploads
