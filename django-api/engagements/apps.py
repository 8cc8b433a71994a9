from django.apps import AppConfig


class EngagementsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "engagements"

    def ready(self) -> None:
        from engagements import signals  # noqa: F401
        from engagements.cache import register_invalidation
        from engagements.notifications import change_feed

        register_invalidation(change_feed)
