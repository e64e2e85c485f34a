class HealthReporterError(Exception):
    """Base error. ``status_code`` and ``message`` are what a client may see."""

    status_code = 500
    message = "An unexpected error occurred."

    def __init__(self, message: str = None):
        self.message = message or self.message
        super().__init__(self.message)


class ConfigurationError(HealthReporterError):
    """Raised at startup; the process must not serve traffic."""


class ValidationError(HealthReporterError):
    status_code = 400
    message = "Invalid request data"


class Unauthenticated(HealthReporterError):
    status_code = 401
    message = "Unauthorized"


class InvalidCredentials(Unauthenticated):
    message = "Invalid email or password"


class NotFound(HealthReporterError):
    status_code = 404
    message = "Report not found"


class Conflict(HealthReporterError):
    status_code = 409
    message = "Report cannot be modified once pushed"


class AlreadyPushed(Conflict):
    message = "Report cannot be pushed; it is not in LOCAL status"


class RegistryError(HealthReporterError):
    status_code = 502
    message = "National registry is unavailable"


# Token Service failures. Never shown to clients; the session gate folds
# both into Unauthenticated.
class CredentialError(Exception):
    pass


class ExpiredCredential(CredentialError):
    pass


class MalformedCredential(CredentialError):
    pass
