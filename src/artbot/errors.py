"""Error taxonomy for external collaborator failures."""


class ArtbotError(Exception):
    """Base class for failures raised by adapters."""


class ClassificationError(ArtbotError):
    """The image service was unreachable or rejected the input."""


class TranslationError(ArtbotError):
    """The translator failed to detect or translate text."""


class StorageError(ArtbotError):
    """An attachment could not be downloaded or stored."""


class StoreQueryError(ArtbotError):
    """A catalog or state store query failed."""


class IntentRecognitionError(ArtbotError):
    """The dispatch model could not be reached or returned garbage."""


class KnowledgeLookupError(ArtbotError):
    """The knowledge base could not be reached."""


class SearchError(ArtbotError):
    """The web search service could not be reached."""


class UntrustedServiceUrlError(ArtbotError):
    """A reply was addressed to a service URL outside the trusted hosts."""
