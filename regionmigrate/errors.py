class MigrateError(Exception):
    """Base error for the project."""

class EnvironmentCheckError(MigrateError):
    pass

class InvalidRootError(EnvironmentCheckError):
    pass

class FileSystemUnavailableError(EnvironmentCheckError):
    pass

class ServiceRunningError(EnvironmentCheckError):
    pass

class InvalidServiceUrlError(EnvironmentCheckError):
    pass

class FileSystemVersionError(MigrateError):
    """Version marker is absent or does not match; the layout needs upgrading."""

class MigrationFailure(MigrateError):
    pass

class RelocationError(MigrateError):
    pass

class CatalogError(MigrateError):
    pass

class ConfigError(MigrateError):
    pass
