from django.apps import AppConfig


class CascadesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "cascades"
    verbose_name = "Cascade Tracking"
