from rest_framework.routers import DefaultRouter


class OptionalSlashRouter(DefaultRouter):
    """``DefaultRouter`` whose routes match with or without a trailing slash.

    ``SimpleRouter`` only accepts a boolean ``trailing_slash``, so the
    optional slash pattern is set after initialisation.
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.trailing_slash = "/?"
