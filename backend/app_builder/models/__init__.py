from app_builder.models.published_app import PublishedApp

__all__ = ["PublishedApp"]
