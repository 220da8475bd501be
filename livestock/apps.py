from django.apps import AppConfig


class LivestockConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "livestock"

    def ready(self):
        """
        Import signals to register them when the app is ready.

        This enables the weight, health and mortality cascades.
        """
        import livestock.signals  # noqa: F401
