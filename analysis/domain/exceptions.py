class AnalysisError(Exception):
    """Base class for every failure the analysis pipeline reports."""


class InvalidInputError(AnalysisError):
    """The submitted URL is malformed or carries no video identifier."""


class UpstreamRetrievalError(AnalysisError):
    """The comment source could not be reached or rejected the request."""


class ClassificationError(AnalysisError):
    """Sentiment classification failed for at least one comment."""


class PersistenceError(AnalysisError):
    """The analysis record could not be written to or read from the store."""


class AnalysisNotFoundError(AnalysisError):
    pass
