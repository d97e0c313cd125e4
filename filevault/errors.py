# filevault/errors.py


class FileVaultError(Exception):
    """Base class for every error raised by the service layer."""


class AlreadyExists(FileVaultError):
    pass


class Unauthorized(FileVaultError):
    pass


class StorageError(FileVaultError):
    """A call to the object-storage backend failed."""


class UploadFailed(StorageError):
    pass


class ListFailed(StorageError):
    pass


class LinkGenerationFailed(StorageError):
    pass


class DeleteFailed(StorageError):
    pass
