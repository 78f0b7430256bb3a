class AppWireError(Exception):
    """Base class for every error raised by appwire."""

    def __init__(self, message: str = ""):
        self.message = message
        super().__init__(self.message)


class SignerMissingError(AppWireError):
    def __init__(
        self,
        message="Request requires a signed body but no signer is configured. Pass signer= or set the APPWIRE_SIG_KEY environment variable.",
    ):
        super().__init__(message)


class RequestAlreadyExecutedError(AppWireError):
    def __init__(
        self,
        message="Request has already been executed and can no longer be modified.",
    ):
        super().__init__(message)


class WorkflowAlreadyRunError(AppWireError):
    def __init__(self, message="Workflow instances are single-shot and cannot be re-run."):
        super().__init__(message)
