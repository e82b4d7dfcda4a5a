"""
Exception taxonomy.

User-input errors are recoverable and leave state untouched. Contract errors
mean a caller misused the session or scoring API and should fail loudly.
Collaborator errors come from storage and import/export.
"""


class KotobaError(Exception):
    """Base class for every error raised by kotoba."""


# --- User input ---
class UserInputError(KotobaError):
    pass


class EmptySelectionError(UserInputError):
    def __init__(self, message: str = "A test needs at least one word."):
        super().__init__(message)


class IncompleteAnswerError(UserInputError):
    def __init__(self, message: str = "Both reading and meaning are required."):
        super().__init__(message)


class ValidationFailedError(UserInputError):
    pass


class ConfirmationRequiredError(UserInputError):
    pass


# --- Contract ---
class ContractError(KotobaError):
    pass


class LengthMismatchError(ContractError):
    def __init__(self, expected: int, actual: int):
        super().__init__(
            f"Expected {expected} answers for {expected} entries, got {actual}."
        )
        self.expected = expected
        self.actual = actual


class InvalidStateError(ContractError):
    pass


class DivisionByZeroError(ContractError, ZeroDivisionError):
    def __init__(self, message: str = "Cannot score an empty test."):
        super().__init__(message)


# --- Lookup ---
class NotFoundError(KotobaError):
    pass


class ListNotFoundError(NotFoundError):
    def __init__(self, list_id: str):
        super().__init__(f"List {list_id!r} not found.")
        self.list_id = list_id


class EntryNotFoundError(NotFoundError):
    def __init__(self, list_id: str, entry_id: str):
        super().__init__(f"Word {entry_id!r} not found in list {list_id!r}.")
        self.list_id = list_id
        self.entry_id = entry_id


class SessionNotFoundError(NotFoundError):
    def __init__(self, message: str = "Session invalid"):
        super().__init__(message)


# --- Collaborators ---
class CollaboratorError(KotobaError):
    pass


class StoreError(CollaboratorError):
    pass


class ImportFormatError(CollaboratorError):
    pass


class NothingToExportError(CollaboratorError):
    def __init__(self, message: str = "There are no lists to export."):
        super().__init__(message)
