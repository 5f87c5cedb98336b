from __future__ import annotations


class AssessmentError(RuntimeError):
    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class ValidationError(AssessmentError):
    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class NotFoundError(AssessmentError):
    def __init__(self, message: str):
        super().__init__(message, status_code=404)


class ExtractionError(AssessmentError):
    def __init__(self, message: str, status_code: int = 422):
        super().__init__(message, status_code=status_code)
