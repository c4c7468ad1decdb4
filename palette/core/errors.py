"""
Domain error taxonomy.

Every error carries a stable code and the HTTP status the API answers with;
app.py turns any PaletteError into a JSON body of {"code", "message"}.
"""

from __future__ import annotations


class PaletteError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 400
    code = "E000"
    message = "Bad request."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


# -------------------------- not found --------------------------
class UserNotFoundError(PaletteError):
    status_code = 404
    code = "U001"
    message = "User not found."


class ColorNotFoundError(PaletteError):
    status_code = 404
    code = "C001"
    message = "Color not found."


class DiaryNotFoundError(PaletteError):
    status_code = 404
    code = "D001"
    message = "Diary not found."


class DiaryEmptyError(DiaryNotFoundError):
    """A diary with no membership rows at all."""

    message = "Diary has no members."


class InviteCodeNotFoundError(PaletteError):
    status_code = 404
    code = "D002"
    message = "Invitation code not found."


class HistoryNotFoundError(PaletteError):
    status_code = 404
    code = "H001"
    message = "History not found."


# -------------------------- conflict / state --------------------------
class DiaryOverUserError(PaletteError):
    code = "D003"
    message = "Diary already has two members."


class DiaryExistUserError(PaletteError):
    code = "D004"
    message = "User is already a member of this diary."


class DiaryOutedUserError(PaletteError):
    code = "D005"
    message = "User left this diary and cannot join again."


class ProgressedHistoryError(PaletteError):
    code = "H002"
    message = "A history is already in progress."


class InvalidInputError(PaletteError):
    code = "V001"
    message = "Invalid input."


# -------------------------- account --------------------------
class DeletedUserError(PaletteError):
    status_code = 403
    code = "U002"
    message = "This account was deleted."


# -------------------------- auth --------------------------
class AuthError(PaletteError):
    status_code = 401


class InvalidTokenError(AuthError):
    code = "T001"
    message = "Invalid token."


class ExpiredTokenError(AuthError):
    code = "T002"
    message = "Token expired."


class MissingTokenError(AuthError):
    code = "T003"
    message = "Token missing."
