class InvalidCityError(ValueError):
    """The requested city slug is not part of the directory."""

    def __init__(self, slug):
        super().__init__(f"Invalid city: {slug!r}")
        self.slug = slug


class ProviderNotConfiguredError(RuntimeError):
    """A provider credential is missing."""

    def __init__(self, provider: str):
        super().__init__(f"{provider} is not configured")
        self.provider = provider
